"""Migration context for structured logging.

Tracks the migration currently being executed using contextvars, so every
log record emitted while it runs carries its version and name.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_migration_version: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "migration_version", default=None
)
_migration_name: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "migration_name", default=None
)
_direction: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "migration_direction", default=None
)


def set_migration_context(
    version: str,
    name: str | None = None,
    direction: str | None = None,
) -> None:
    """Set the current migration context.

    Args:
        version: Prefixed migration version (e.g., "20230101").
        name: Migration class name.
        direction: "up" or "down".
    """
    _migration_version.set(version)
    _migration_name.set(name)
    _direction.set(direction)


def clear_migration_context() -> None:
    """Clear the current migration context."""
    _migration_version.set(None)
    _migration_name.set(None)
    _direction.set(None)


@contextmanager
def migration_context(
    version: str,
    name: str | None = None,
    direction: str | None = None,
) -> Generator[None, None, None]:
    """Context manager scoping log records to one migration.

    Example:
        with migration_context("20230101", "CreateUsers", "up"):
            logger.info("Creating table")  # tagged [20230101]
    """
    old_version = _migration_version.get()
    old_name = _migration_name.get()
    old_direction = _direction.get()
    try:
        set_migration_context(version, name, direction)
        yield
    finally:
        _migration_version.set(old_version)
        _migration_name.set(old_name)
        _direction.set(old_direction)


def get_migration_context() -> tuple[str | None, str | None, str | None]:
    """Get current migration context.

    Returns:
        Tuple of (version, name, direction), any may be None.
    """
    return _migration_version.get(), _migration_name.get(), _direction.get()


class MigrationContextFilter(logging.Filter):
    """Logging filter that injects the running migration into log records.

    Adds migration_version, migration_name and migration_direction for JSON
    output, and a compact migration_tag like ``[20230101] `` for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        version, name, direction = get_migration_context()

        record.migration_version = version
        record.migration_name = name
        record.migration_direction = direction
        record.migration_tag = f"[{version}] " if version else ""

        return True
