"""CLI command creating a new migration file."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

import click

from pymig.cli import get_config_from_context
from pymig.migration.descriptor import migration_name_part, migration_to_class_name

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[a-z][a-z0-9_]*$")

VERSION_FORMAT = "%Y%m%d%H%M%S"

MIGRATION_TEMPLATE = '''"""{description}"""

from pymig import Migration


class {class_name}(Migration):
    description = "{description}"

    def up(self) -> None:
        """Apply the migration."""

    def down(self) -> None:
        """Revert the migration."""
'''


def generate_migration(
    directory: Path,
    name: str,
    now: datetime | None = None,
) -> Path:
    """Write a new migration file named ``<timestamp>_<name>.py``.

    Args:
        directory: Migrations directory (created if missing).
        name: snake_case migration name, e.g. ``add_email_to_users``.
        now: Timestamp to derive the version from (default: current UTC time).

    Returns:
        Path of the created file.

    Raises:
        ValueError: If the name is not snake_case or is already used.
    """
    if not _NAME_RE.match(name):
        raise ValueError(
            f"Migration name must be snake_case (a-z, 0-9, _): {name!r}"
        )

    directory.mkdir(parents=True, exist_ok=True)
    for existing in directory.glob("*.py"):
        if migration_name_part(existing.name) == name:
            raise ValueError(
                f"A migration named {name!r} already exists: {existing.name}"
            )

    version = (now or datetime.now(timezone.utc)).strftime(VERSION_FORMAT)
    path = directory / f"{version}_{name}.py"
    if path.exists():
        raise ValueError(f"Migration file already exists: {path}")

    path.write_text(
        MIGRATION_TEMPLATE.format(
            class_name=migration_to_class_name(name),
            description=name.replace("_", " ").capitalize(),
        ),
        encoding="utf-8",
    )
    logger.info("Generated migration %s", path)
    return path


@click.command("generate")
@click.argument("name")
@click.option(
    "--path",
    "directory",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Directory to create the migration in (default: configured path).",
)
@click.pass_context
def generate_command(ctx: click.Context, name: str, directory: Path | None) -> None:
    """Create a new, empty migration.

    Examples:

        pymig generate add_email_to_users
    """
    if directory is None:
        directory = get_config_from_context(ctx).migrations_path
    if directory is None:
        raise click.ClickException(
            "No migrations directory configured; pass --path."
        )

    try:
        path = generate_migration(directory, name)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"+f {path}")
