"""Fixtures for CLI tests."""

from pathlib import Path

import pytest

import pymig.cli
from pymig.config.models import AdapterConfig, CollectionConfig, PymigConfig

# Migration creating one table through the SQLite connection in its context
TABLE_MIGRATION = '''
from pymig import Migration


class {class_name}(Migration):
    description = "Create {table}"

    def up(self) -> None:
        self.context["connection"].execute(
            "CREATE TABLE {table} (id INTEGER PRIMARY KEY)"
        )

    def down(self) -> None:
        self.context["connection"].execute("DROP TABLE {table}")
'''


@pytest.fixture(autouse=True)
def skip_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CLI invocations from replacing the root logger handlers."""
    monkeypatch.setattr(pymig.cli, "_logging_configured", True)


@pytest.fixture
def project(tmp_path: Path, write_migration) -> Path:
    """Project directory with two table-creating migrations."""
    migrations = tmp_path / "migrations"
    write_migration(
        migrations,
        "001_create_users.py",
        source=TABLE_MIGRATION.format(class_name="CreateUsers", table="users"),
    )
    write_migration(
        migrations,
        "002_create_posts.py",
        source=TABLE_MIGRATION.format(class_name="CreatePosts", table="posts"),
    )
    return tmp_path


@pytest.fixture
def cli_config(project: Path) -> PymigConfig:
    return PymigConfig(
        adapter=AdapterConfig(type="sqlite", path=project / "app.db"),
        collections=[CollectionConfig(path=project / "migrations")],
    )


@pytest.fixture
def invoke(runner, cli_config: PymigConfig):
    """Invoke the CLI with the project configuration injected."""

    def _invoke(*args: str):
        return runner.invoke(pymig.cli.main, list(args), obj={"config": cli_config})

    return _invoke
