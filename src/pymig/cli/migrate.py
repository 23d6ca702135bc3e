"""CLI commands that apply or revert migrations."""

from __future__ import annotations

import logging

import click

from pymig.cli import get_app
from pymig.cli.errors import handle_errors
from pymig.migration.base import Migration
from pymig.migration.descriptor import version_number

logger = logging.getLogger(__name__)


def _report(migrations: list[Migration], verb: str) -> None:
    if not migrations:
        click.echo("No migrations to run.")
        return
    noun = "migration" if len(migrations) == 1 else "migrations"
    click.echo(f"{verb} {len(migrations)} {noun}.")


@click.command("migrate")
@click.option(
    "-t",
    "--target",
    default=None,
    help="Version to migrate to (default: latest). A lower version reverts.",
)
@click.pass_context
def migrate_command(ctx: click.Context, target: str | None) -> None:
    """Run all pending migrations up to a version.

    Examples:

        # Apply everything that is pending
        pymig migrate

        # Apply pending migrations up to 20230215000000
        pymig migrate -t 20230215000000
    """
    app = get_app(ctx)
    with handle_errors():
        current = version_number(app.get_version())
        if target is not None and version_number(target) < current:
            migrations = app.down(target)
            _report(migrations, "Reverted")
        else:
            migrations = app.up(target)
            _report(migrations, "Applied")


@click.command("rollback")
@click.option(
    "-t",
    "--target",
    default=None,
    help="Version to roll back to (default: the previous version). Use 0 for all.",
)
@click.pass_context
def rollback_command(ctx: click.Context, target: str | None) -> None:
    """Revert the last migration, or every migration above a version.

    Examples:

        # Revert the most recent migration
        pymig rollback

        # Revert everything
        pymig rollback -t 0
    """
    app = get_app(ctx)
    with handle_errors():
        migrations = app.rollback(target)
    _report(migrations, "Reverted")


@click.command("up")
@click.argument("version")
@click.pass_context
def up_command(ctx: click.Context, version: str) -> None:
    """Apply one migration by version."""
    app = get_app(ctx)
    with handle_errors():
        ran = app.up_version(version)
    if not ran:
        click.echo(f"Migration {version} is already applied.")


@click.command("down")
@click.argument("version")
@click.pass_context
def down_command(ctx: click.Context, version: str) -> None:
    """Revert one migration by version."""
    app = get_app(ctx)
    with handle_errors():
        ran = app.down_version(version)
    if not ran:
        click.echo(f"Migration {version} is not applied.")


@click.command("redo")
@click.argument("version")
@click.pass_context
def redo_command(ctx: click.Context, version: str) -> None:
    """Revert and re-apply one migration."""
    app = get_app(ctx)
    with handle_errors():
        app.redo(version)
