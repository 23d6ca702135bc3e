"""Tests for MigrationApplication."""

import sqlite3
from collections.abc import Callable
from pathlib import Path

import pytest

from pymig.adapter import FileAdapter, SqliteAdapter
from pymig.api import (
    MigrationApplication,
    MigrationStatus,
    create_application,
    parse_target,
)
from pymig.config.models import AdapterConfig, CollectionConfig, PymigConfig
from pymig.exceptions import (
    DuplicateVersionError,
    InvalidSourceError,
    InvalidVersionError,
    MissingAdapterError,
)
from pymig.migration import BufferedOutput, MigrationCollection

FAILING_MIGRATION = '''
from pymig import Migration


class Explode(Migration):
    def up(self) -> None:
        raise RuntimeError("boom")

    def down(self) -> None:
        pass
'''

AppFactory = Callable[..., MigrationApplication]


def _versions(migrations) -> list[str]:
    return [m.version for m in migrations]


class TestParseTarget:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0, 0), (5, 5), ("20230101", 20230101), (" 7 ", 7), (None, None)],
    )
    def test_valid(self, value, expected) -> None:
        assert parse_target(value, allow_none=True) == expected

    @pytest.mark.parametrize("value", [-1, "-3", "abc", "", True])
    def test_invalid(self, value) -> None:
        with pytest.raises(InvalidVersionError):
            parse_target(value, allow_none=True)

    def test_none_when_not_allowed(self) -> None:
        with pytest.raises(InvalidVersionError):
            parse_target(None, allow_none=False)


class TestUpDown:
    """Tests for MigrationApplication.up() and down()."""

    def test_up_applies_all_in_order(
        self,
        app: MigrationApplication,
        file_adapter: FileAdapter,
        journal: list,
    ) -> None:
        applied = app.up()

        assert _versions(applied) == ["001", "002"]
        assert journal == [("up", "001"), ("up", "002")]
        assert file_adapter.fetch_all() == ["001", "002"]
        assert app.get_version() == "002"

    def test_up_creates_schema(
        self, app: MigrationApplication, file_adapter: FileAdapter
    ) -> None:
        assert not file_adapter.has_schema()
        app.up()
        assert file_adapter.has_schema()

    def test_down_to_version(
        self,
        app: MigrationApplication,
        file_adapter: FileAdapter,
        journal: list,
    ) -> None:
        app.up()
        journal.clear()

        reverted = app.down(1)

        assert _versions(reverted) == ["002"]
        assert journal == [("down", "002")]
        assert file_adapter.fetch_all() == ["001"]
        assert app.get_version() == "001"

    def test_round_trip_restores_empty_store(
        self,
        app: MigrationApplication,
        file_adapter: FileAdapter,
        journal: list,
    ) -> None:
        app.up()
        app.down(0)

        assert file_adapter.fetch_all() == []
        assert app.get_version() == "0"
        assert journal == [
            ("up", "001"),
            ("up", "002"),
            ("down", "002"),
            ("down", "001"),
        ]

    def test_second_up_is_noop(
        self, app: MigrationApplication, journal: list
    ) -> None:
        app.up()
        journal.clear()

        assert app.up() == []
        assert journal == []

    def test_up_to_target(
        self, app: MigrationApplication, file_adapter: FileAdapter
    ) -> None:
        assert _versions(app.up(1)) == ["001"]
        assert file_adapter.fetch_all() == ["001"]

    def test_up_with_lower_target_never_reverts(
        self, app: MigrationApplication, file_adapter: FileAdapter
    ) -> None:
        app.up()
        assert app.up(1) == []
        assert file_adapter.fetch_all() == ["001", "002"]

    def test_up_fills_gap_below_current(
        self,
        app: MigrationApplication,
        file_adapter: FileAdapter,
        journal: list,
    ) -> None:
        """A migration added below the current version is still applied."""
        file_adapter.create_schema()
        file_adapter._save(["002"])

        applied = app.up()

        assert _versions(applied) == ["001"]
        assert journal == [("up", "001")]

    def test_down_on_empty_store(self, app: MigrationApplication) -> None:
        assert app.down(0) == []

    def test_down_only_reverts_applied(
        self,
        app: MigrationApplication,
        file_adapter: FileAdapter,
        journal: list,
    ) -> None:
        file_adapter.create_schema()
        file_adapter._save(["002"])

        reverted = app.down(0)

        assert _versions(reverted) == ["002"]
        assert journal == [("down", "002")]

    def test_negative_target_rejected(self, app: MigrationApplication) -> None:
        with pytest.raises(InvalidVersionError):
            app.up(-1)
        with pytest.raises(InvalidVersionError):
            app.down(-1)

    def test_down_requires_target(self, app: MigrationApplication) -> None:
        with pytest.raises(InvalidVersionError):
            app.down(None)

    def test_missing_adapter(self, migrations_dir: Path) -> None:
        collection = MigrationCollection()
        collection.add_path(migrations_dir)
        app = MigrationApplication(None, BufferedOutput(), [collection])

        with pytest.raises(MissingAdapterError):
            app.up()
        with pytest.raises(MissingAdapterError):
            app.get_version()

    def test_progress_written_to_output(
        self, app: MigrationApplication, output: BufferedOutput
    ) -> None:
        app.up()
        lines = output.lines
        assert lines[0] == " == 001 CreateUsers migrating"
        assert lines[2] == " == 002 AddEmail migrating"

    def test_failure_keeps_earlier_migrations(
        self,
        migrations_dir: Path,
        make_app: AppFactory,
        file_adapter: FileAdapter,
        journal: list,
        write_migration,
    ) -> None:
        write_migration(migrations_dir, "003_explode.py", source=FAILING_MIGRATION)
        write_migration(migrations_dir, "004_after.py")
        collection = MigrationCollection()
        collection.add_path(migrations_dir)
        app = make_app(collection)

        with pytest.raises(RuntimeError, match="boom"):
            app.up()

        assert file_adapter.fetch_all() == ["001", "002"]
        assert ("up", "004") not in journal

    def test_duplicate_versions_abort_before_running(
        self,
        migrations_dir: Path,
        make_app: AppFactory,
        write_migration,
        journal: list,
        file_adapter: FileAdapter,
    ) -> None:
        write_migration(migrations_dir, "1_create_accounts.py")
        collection = MigrationCollection()
        collection.add_path(migrations_dir)
        app = make_app(collection)

        with pytest.raises(DuplicateVersionError):
            app.up()

        assert journal == []
        assert file_adapter.fetch_all() == []


class TestGetVersion:
    def test_empty_store(self, app: MigrationApplication) -> None:
        assert app.get_version() == "0"
        assert app.get_version() != 0

    def test_highest_version(
        self, make_app: AppFactory, file_adapter: FileAdapter
    ) -> None:
        file_adapter.create_schema()
        file_adapter._save(["20230101", "20230215"])
        assert make_app().get_version() == "20230215"

    def test_numeric_not_lexical(
        self, make_app: AppFactory, file_adapter: FileAdapter
    ) -> None:
        file_adapter.create_schema()
        file_adapter._save(["9", "10"])
        assert make_app().get_version() == "10"


class TestCollections:
    def test_multiple_collections_with_prefix(
        self,
        tmp_path: Path,
        make_app: AppFactory,
        write_migration,
        file_adapter: FileAdapter,
        journal: list,
    ) -> None:
        write_migration(tmp_path / "core", "001_create_users.py")
        write_migration(tmp_path / "billing", "002_create_users.py")

        core = MigrationCollection()
        core.add_path(tmp_path / "core")
        billing = MigrationCollection(namespace="billing", version_prefix="billing_")
        billing.add_path(tmp_path / "billing")

        app = make_app(core, billing)
        app.up()

        assert journal == [("up", "001"), ("up", "billing_002")]
        assert file_adapter.fetch_all() == ["001", "billing_002"]
        assert app.get_version() == "billing_002"

    def test_add_collection(
        self, make_app: AppFactory, migrations_dir: Path
    ) -> None:
        app = make_app()
        collection = MigrationCollection()
        collection.add_path(migrations_dir)
        app.add_collection(collection)

        assert [d.version for d in app.get_descriptors()] == ["001", "002"]


class TestSingleVersion:
    """Tests for rollback, up_version, down_version and redo."""

    def test_rollback_reverts_latest(
        self,
        app: MigrationApplication,
        file_adapter: FileAdapter,
    ) -> None:
        app.up()
        assert _versions(app.rollback()) == ["002"]
        assert file_adapter.fetch_all() == ["001"]

    def test_rollback_last_migration(
        self, app: MigrationApplication, file_adapter: FileAdapter
    ) -> None:
        app.up(1)
        assert _versions(app.rollback()) == ["001"]
        assert file_adapter.fetch_all() == []

    def test_rollback_nothing_applied(self, app: MigrationApplication) -> None:
        assert app.rollback() == []

    def test_rollback_to_target(
        self, app: MigrationApplication, file_adapter: FileAdapter
    ) -> None:
        app.up()
        assert _versions(app.rollback(0)) == ["002", "001"]

    def test_up_version(
        self,
        app: MigrationApplication,
        file_adapter: FileAdapter,
        journal: list,
    ) -> None:
        assert app.up_version(2) is True
        assert app.up_version("002") is False
        assert journal == [("up", "002")]
        assert file_adapter.fetch_all() == ["002"]

    def test_down_version(
        self,
        app: MigrationApplication,
        file_adapter: FileAdapter,
        journal: list,
    ) -> None:
        app.up()
        journal.clear()

        assert app.down_version(1) is True
        assert app.down_version(1) is False
        assert journal == [("down", "001")]
        assert file_adapter.fetch_all() == ["002"]

    def test_unknown_version(self, app: MigrationApplication) -> None:
        with pytest.raises(InvalidVersionError, match="no migration"):
            app.up_version(99)

    def test_redo(
        self, app: MigrationApplication, journal: list
    ) -> None:
        app.up()
        journal.clear()

        app.redo(2)

        assert journal == [("down", "002"), ("up", "002")]


class TestStatus:
    def test_pending(self, app: MigrationApplication) -> None:
        assert [d.version for d in app.get_pending()] == ["001", "002"]
        app.up(1)
        assert [d.version for d in app.get_pending()] == ["002"]

    def test_status_rows(
        self, app: MigrationApplication, file_adapter: FileAdapter
    ) -> None:
        app.up(1)
        file_adapter._save(["001", "005"])

        rows = app.get_status()

        assert [(r.version, r.name, r.applied, r.missing) for r in rows] == [
            ("001", "CreateUsers", True, False),
            ("002", "AddEmail", False, False),
            ("005", None, True, True),
        ]

    def test_status_descriptions(self, app: MigrationApplication) -> None:
        assert [row.description for row in app.get_status()] == [
            "CreateUsers test migration",
            "AddEmail test migration",
        ]

    def test_status_without_schema(self, app: MigrationApplication) -> None:
        assert all(not row.applied for row in app.get_status())

    def test_status_number(self) -> None:
        assert MigrationStatus("billing_0042", "X", True).number == 42


class TestCreateApplication:
    """Tests for wiring an application from configuration."""

    def test_sqlite_context_has_connection(
        self, tmp_path: Path, migrations_dir: Path
    ) -> None:
        config = PymigConfig(
            adapter=AdapterConfig(type="sqlite", path=tmp_path / "app.db"),
            collections=[CollectionConfig(path=migrations_dir)],
        )

        app = create_application(config)

        assert isinstance(app.adapter, SqliteAdapter)
        assert [d.version for d in app.get_descriptors()] == ["001", "002"]
        assert app.adapter.table == "migrations"

    def test_close_releases_connection(
        self, tmp_path: Path, migrations_dir: Path
    ) -> None:
        config = PymigConfig(
            adapter=AdapterConfig(type="sqlite", path=tmp_path / "app.db"),
            collections=[CollectionConfig(path=migrations_dir)],
        )
        app = create_application(config)
        app.close()

        with pytest.raises(sqlite3.ProgrammingError):
            app.adapter.connection.execute("SELECT 1")

    def test_file_adapter(self, tmp_path: Path, migrations_dir: Path) -> None:
        config = PymigConfig(
            adapter=AdapterConfig(type="file", path=tmp_path / "versions.log"),
            collections=[
                CollectionConfig(path=migrations_dir),
                CollectionConfig(
                    migrations=[migrations_dir / "001_create_users.py"],
                    namespace="extra",
                    version_prefix="x_",
                ),
            ],
        )

        app = create_application(config)

        assert isinstance(app.adapter, FileAdapter)
        assert [d.prefixed_version for d in app.get_descriptors()] == [
            "001",
            "002",
            "x_001",
        ]

    def test_missing_directory(self, tmp_path: Path) -> None:
        config = PymigConfig(
            adapter=AdapterConfig(type="file", path=tmp_path / "v.log"),
            collections=[CollectionConfig(path=tmp_path / "missing")],
        )
        with pytest.raises(InvalidSourceError):
            create_application(config)
