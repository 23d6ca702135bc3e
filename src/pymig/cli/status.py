"""CLI commands reporting migration status."""

from __future__ import annotations

import json

import click

from pymig.api import MigrationStatus
from pymig.cli import get_app
from pymig.cli.errors import handle_errors
from pymig.cli.exit_codes import ExitCode


def _status_to_dict(row: MigrationStatus) -> dict:
    return {
        "version": row.version,
        "name": row.name,
        "status": "up" if row.applied else "down",
        "missing": row.missing,
        "description": row.description,
        "locator": row.locator,
    }


def format_status_table(rows: list[MigrationStatus]) -> str:
    """Render status rows as a fixed-width table."""
    lines = [
        "",
        " Status   Migration ID    Migration Name ",
        "-----------------------------------------",
    ]
    for row in rows:
        state = "up" if row.applied else "down"
        name = "** MISSING **" if row.missing else row.name
        line = f"{state:>8}  {row.version:>14}  {name}"
        if row.description:
            line = f"{line}  ({row.description})"
        lines.append(line)
    lines.append("")
    return "\n".join(lines)


@click.command("status")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
def status_command(ctx: click.Context, json_output: bool) -> None:
    """Show which migrations are applied.

    Versions recorded in the store without a matching migration file are
    listed as ** MISSING **.
    """
    app = get_app(ctx)
    with handle_errors():
        rows = app.get_status()
        current_version = app.get_version()

    if json_output:
        payload = {
            "current_version": current_version,
            "migrations": [_status_to_dict(row) for row in rows],
        }
        click.echo(json.dumps(payload, indent=2))
        return

    click.echo(format_status_table(rows))


@click.command("check")
@click.pass_context
def check_command(ctx: click.Context) -> None:
    """Exit non-zero if any migration is pending.

    Intended for deploy scripts and CI.
    """
    app = get_app(ctx)
    with handle_errors():
        rows = [
            MigrationStatus(
                version=d.prefixed_version,
                name=d.class_name,
                applied=False,
                locator=d.locator,
                description=app.loader.resolve_class(d).description,
            )
            for d in app.get_pending()
        ]

    if not rows:
        click.echo("No pending migrations.")
        return

    click.echo(format_status_table(rows))
    raise SystemExit(ExitCode.PENDING_MIGRATIONS)
