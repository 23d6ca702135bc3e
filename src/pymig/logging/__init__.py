"""Structured logging module for pymig.

Provides configurable logging with JSON format support and file rotation.
Log records emitted while a migration runs are tagged with its version.
"""

from pymig.logging.config import configure_logging, remove_handlers
from pymig.logging.context import (
    MigrationContextFilter,
    clear_migration_context,
    get_migration_context,
    migration_context,
    set_migration_context,
)
from pymig.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "MigrationContextFilter",
    "clear_migration_context",
    "configure_logging",
    "get_migration_context",
    "migration_context",
    "remove_handlers",
    "set_migration_context",
]
