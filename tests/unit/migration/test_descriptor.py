"""Tests for migration descriptors and version helpers."""

import pytest

from pymig.migration.descriptor import (
    MigrationDescriptor,
    extract_version,
    migration_name_part,
    migration_to_class_name,
    parse_descriptor,
    version_number,
)


class TestExtractVersion:
    """Tests for extract_version function."""

    def test_leading_digits(self) -> None:
        assert extract_version("/srv/app/migrations/20230101_create_users.py") == (
            "20230101"
        )

    def test_keeps_leading_zeros(self) -> None:
        assert extract_version("001_create_users.py") == "001"

    def test_bare_version(self) -> None:
        assert extract_version("42") == "42"

    def test_no_leading_digits(self) -> None:
        assert extract_version("readme.txt") is None
        assert extract_version("create_users_001.py") is None

    def test_digits_in_directory_are_ignored(self) -> None:
        """Only the base name counts."""
        assert extract_version("/srv/2023/readme.txt") is None


class TestVersionNumber:
    """Tests for version_number function."""

    def test_plain_digits(self) -> None:
        assert version_number("20230215") == 20230215

    def test_prefixed_version_uses_trailing_digits(self) -> None:
        assert version_number("billing_20230215") == 20230215

    def test_int_passthrough(self) -> None:
        assert version_number(7) == 7

    def test_none_and_no_digits_are_zero(self) -> None:
        assert version_number(None) == 0
        assert version_number("abc") == 0

    def test_numeric_not_lexicographic(self) -> None:
        """'10' sorts after '9'."""
        assert sorted(["10", "9"], key=version_number) == ["9", "10"]


class TestMigrationToClassName:
    """Tests for migration_to_class_name function."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("create_table_user", "CreateTableUser"),
            ("add_email", "AddEmail"),
            ("seed", "Seed"),
            ("add_HTTP_log", "AddHTTPLog"),
        ],
    )
    def test_conversion(self, name: str, expected: str) -> None:
        assert migration_to_class_name(name) == expected


class TestMigrationNamePart:
    """Tests for migration_name_part function."""

    def test_strips_version_and_extension(self) -> None:
        assert migration_name_part("/x/001_create_users.py") == "create_users"

    def test_strips_from_first_dot(self) -> None:
        assert migration_name_part("003_seed.data.py") == "seed"


class TestParseDescriptor:
    """Tests for parse_descriptor function."""

    def test_valid_locator(self) -> None:
        descriptor = parse_descriptor(
            "/m/002_add_email.py", namespace="billing", version_prefix="b_"
        )

        assert descriptor == MigrationDescriptor(
            locator="/m/002_add_email.py",
            version="002",
            name_part="add_email",
            namespace="billing",
            version_prefix="b_",
        )
        assert descriptor.number == 2
        assert descriptor.prefixed_version == "b_002"
        assert descriptor.class_name == "AddEmail"
        assert descriptor.qualified_name == "billing.AddEmail"
        assert descriptor.basename == "002_add_email.py"

    def test_default_options(self) -> None:
        descriptor = parse_descriptor("001_create_users.py")

        assert descriptor is not None
        assert descriptor.prefixed_version == "001"
        assert descriptor.qualified_name == "root.CreateUsers"

    def test_invalid_locator_returns_none(self) -> None:
        assert parse_descriptor("readme.txt") is None
