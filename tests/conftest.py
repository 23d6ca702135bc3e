"""Shared test fixtures for pymig."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from pymig.adapter import FileAdapter
from pymig.api import MigrationApplication
from pymig.migration import BufferedOutput, MigrationCollection, MigrationTypeRegistry
from pymig.migration.descriptor import migration_name_part, migration_to_class_name

# Migration that records its calls in context["journal"]
JOURNAL_MIGRATION = '''
from pymig import Migration


class {class_name}(Migration):
    description = "{class_name} test migration"

    def up(self) -> None:
        self.context["journal"].append(("up", self.version))

    def down(self) -> None:
        self.context["journal"].append(("down", self.version))
'''


WriteMigration = Callable[..., Path]


@pytest.fixture
def write_migration() -> WriteMigration:
    """Return a helper writing a migration file into a directory.

    The class name is derived from the filename unless given explicitly;
    ``source`` replaces the generated module body entirely.
    """

    def _write(
        directory: Path,
        filename: str,
        class_name: str | None = None,
        source: str | None = None,
    ) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        if class_name is None:
            class_name = migration_to_class_name(migration_name_part(filename))
        if source is None:
            source = JOURNAL_MIGRATION.format(class_name=class_name)
        path = directory / filename
        path.write_text(source)
        return path

    return _write


@pytest.fixture
def migrations_dir(tmp_path: Path, write_migration: WriteMigration) -> Path:
    """Directory with two migrations and an unrelated file."""
    directory = tmp_path / "migrations"
    write_migration(directory, "001_create_users.py")
    write_migration(directory, "002_add_email.py")
    (directory / "readme.txt").write_text("not a migration")
    return directory


@pytest.fixture
def journal() -> list[tuple[str, str]]:
    """Calls recorded by journal migrations."""
    return []


@pytest.fixture
def registry() -> MigrationTypeRegistry:
    """Fresh class registry, isolated from the process-wide one."""
    return MigrationTypeRegistry()


@pytest.fixture
def output() -> BufferedOutput:
    return BufferedOutput()


@pytest.fixture
def file_adapter(tmp_path: Path) -> FileAdapter:
    return FileAdapter(tmp_path / "versions.log")


@pytest.fixture
def make_app(
    file_adapter: FileAdapter,
    output: BufferedOutput,
    registry: MigrationTypeRegistry,
    journal: list[tuple[str, str]],
) -> Callable[..., MigrationApplication]:
    """Factory building an application over the given collections."""

    def _make(*collections: MigrationCollection) -> MigrationApplication:
        return MigrationApplication(
            file_adapter,
            output,
            collections,
            registry=registry,
            context={"journal": journal},
        )

    return _make


@pytest.fixture
def app(
    migrations_dir: Path,
    make_app: Callable[..., MigrationApplication],
) -> MigrationApplication:
    """Application over the default migrations directory."""
    collection = MigrationCollection()
    collection.add_path(migrations_dir)
    return make_app(collection)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()
