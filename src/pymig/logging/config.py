"""Install pymig's log handlers on the root logger.

pymig is used both as a CLI and as a library embedded in another program.
configure_logging() therefore only ever replaces handlers it installed
itself; handlers added by the host application stay in place. Every handler
it installs carries a MigrationContextFilter, so records emitted from inside
a migration (including from the migration file's own loggers) are tagged
with that migration's version.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from pymig.logging.context import MigrationContextFilter
from pymig.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from pymig.config.models import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(migration_tag)s%(name)s: %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# Handlers installed by the last configure_logging() call
_installed: list[logging.Handler] = []


def build_formatter(config: LoggingConfig) -> logging.Formatter:
    """Return the formatter for the configured log format."""
    if config.format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def _open_log_file(config: LoggingConfig) -> logging.Handler | None:
    """Open the rotating log file, or return None if it cannot be opened."""
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        # Logging is not configured yet, so report on stderr directly
        sys.stderr.write(f"Warning: cannot open log file {path}: {e}\n")
        return None


def remove_handlers() -> None:
    """Detach and close the handlers installed by configure_logging()."""
    root = logging.getLogger()
    while _installed:
        handler = _installed.pop()
        root.removeHandler(handler)
        handler.close()


def configure_logging(config: LoggingConfig) -> list[logging.Handler]:
    """Configure pymig logging.

    Output goes to the log file when one is configured, and to stderr when
    no file is configured, when the file cannot be opened, or when
    ``include_stderr`` is set. Calling this again replaces the handlers of
    the previous call.

    Args:
        config: Logging configuration.

    Returns:
        The handlers now installed on the root logger.
    """
    remove_handlers()

    level = logging.getLevelName(config.level.upper())
    formatter = build_formatter(config)
    context_filter = MigrationContextFilter()

    handlers: list[logging.Handler] = []
    file_handler = _open_log_file(config) if config.file else None
    if file_handler is not None:
        handlers.append(file_handler)
    if file_handler is None or config.include_stderr:
        handlers.append(logging.StreamHandler(sys.stderr))

    root = logging.getLogger()
    root.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root.addHandler(handler)
        _installed.append(handler)

    return list(handlers)
