"""Translate engine errors into CLI messages and exit codes."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

import click

from pymig.cli.exit_codes import ExitCode
from pymig.config import ConfigError
from pymig.exceptions import (
    DuplicateImplementationError,
    DuplicateVersionError,
    ImplementationNotFoundError,
    InvalidDescriptorError,
    InvalidImplementationError,
    InvalidSourceError,
    InvalidVersionError,
    MigrationError,
    MissingAdapterError,
)

logger = logging.getLogger(__name__)

_EXIT_CODES: tuple[tuple[type[Exception], ExitCode], ...] = (
    (ConfigError, ExitCode.CONFIG_ERROR),
    (InvalidVersionError, ExitCode.INVALID_VERSION),
    (InvalidSourceError, ExitCode.INVALID_SOURCE),
    (DuplicateVersionError, ExitCode.DUPLICATE_MIGRATION),
    (DuplicateImplementationError, ExitCode.DUPLICATE_MIGRATION),
    (InvalidDescriptorError, ExitCode.INVALID_MIGRATION),
    (ImplementationNotFoundError, ExitCode.INVALID_MIGRATION),
    (InvalidImplementationError, ExitCode.INVALID_MIGRATION),
    (MissingAdapterError, ExitCode.ADAPTER_ERROR),
)


def exit_code_for(error: Exception) -> ExitCode:
    """Return the exit code for an engine or configuration error."""
    for error_type, code in _EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return ExitCode.GENERAL_ERROR


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report errors as a single line and exit with the matching code.

    Errors raised by a migration itself are logged with their traceback;
    the version store is left as it was when the migration failed.
    """
    try:
        yield
    except click.ClickException:
        raise
    except (MigrationError, ConfigError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(exit_code_for(e)) from e
    except sqlite3.Error as e:
        logger.exception("Version store error")
        click.echo(f"Error: version store failed: {e}", err=True)
        raise SystemExit(ExitCode.ADAPTER_ERROR) from e
    except KeyboardInterrupt as e:
        click.echo("Interrupted.", err=True)
        raise SystemExit(ExitCode.INTERRUPTED) from e
    except Exception as e:
        logger.exception("Migration failed")
        click.echo(f"Error: migration failed: {e}", err=True)
        raise SystemExit(ExitCode.MIGRATION_FAILED) from e
