"""CLI command setting up a project for migrations."""

from __future__ import annotations

import logging
from pathlib import Path

import click
import yaml

from pymig.cli import get_app, get_config_from_context
from pymig.cli.errors import handle_errors
from pymig.config.loader import DEFAULT_CONFIG_FILE, get_config

logger = logging.getLogger(__name__)


def build_default_config(adapter: str, migrations_path: str) -> dict:
    """Contents of a freshly initialized config file."""
    store = "migrations.db" if adapter == "sqlite" else ".migrations.log"
    return {
        "adapter": {"type": adapter, "path": store, "table": "migrations"},
        "migrations_path": migrations_path,
        "logging": {"level": "info", "format": "text"},
    }


def write_config_file(path: Path, data: dict) -> None:
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False)


@click.command("init")
@click.option(
    "--adapter",
    type=click.Choice(["sqlite", "file"]),
    default="sqlite",
    show_default=True,
    help="Version store for a new config file.",
)
@click.option(
    "--migrations-dir",
    default="migrations",
    show_default=True,
    help="Migrations directory for a new config file.",
)
@click.pass_context
def init_command(ctx: click.Context, adapter: str, migrations_dir: str) -> None:
    """Create pymig.yaml, the migrations directory and the version store.

    An existing config file is left untouched; the version store and the
    migrations directory it names are created if missing.
    """
    config = get_config_from_context(ctx)

    if config.config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_FILE
        write_config_file(config_path, build_default_config(adapter, migrations_dir))
        click.echo(f"+f {config_path}")

        with handle_errors():
            config = get_config(config_path=config_path)
        ctx.obj["config"] = config

    migrations_path = config.migrations_path
    if migrations_path is not None and not migrations_path.exists():
        migrations_path.mkdir(parents=True)
        click.echo(f"+d {migrations_path}")

    app = get_app(ctx)
    with handle_errors():
        adapter_store = app.adapter
        if adapter_store is not None and not adapter_store.has_schema():
            adapter_store.create_schema()
            click.echo("Version store created.")
        else:
            click.echo("Version store already initialized.")
