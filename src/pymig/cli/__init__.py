"""CLI module for pymig."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import click

from pymig.api import MigrationApplication, create_application
from pymig.cli.errors import handle_errors
from pymig.config import (
    ConfigSource,
    LoggingConfig,
    PymigConfig,
    get_config,
)
from pymig.logging import configure_logging
from pymig.migration.output import ClickOutput

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def apply_log_options(
    base: LoggingConfig,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> LoggingConfig:
    """Return the configured logging settings with the global CLI options applied.

    Options left unset keep the value from the config file or environment.
    """
    changes: dict[str, object] = {}
    if log_level is not None:
        changes["level"] = log_level.lower()
    if log_file is not None:
        changes["file"] = log_file
    if log_json:
        changes["format"] = "json"
    return dataclasses.replace(base, **changes) if changes else base


def _configure_logging(
    config: PymigConfig,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from the config file merged with CLI options.

    Args:
        config: Effective configuration.
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    global _logging_configured
    if _logging_configured:
        return

    configure_logging(apply_log_options(config.logging, log_level, log_file, log_json))
    _logging_configured = True


def get_config_from_context(ctx: click.Context) -> PymigConfig:
    """Return the configuration loaded by the main group."""
    return ctx.obj["config"]


def get_app(ctx: click.Context) -> MigrationApplication:
    """Return the application, wiring it from configuration on first use.

    An application created here is closed when the command finishes.
    Tests inject a ready application through ``obj={"app": ...}``.
    """
    app = ctx.obj.get("app")
    if app is None:
        with handle_errors():
            app = create_application(
                get_config_from_context(ctx), output=ClickOutput()
            )
        ctx.obj["app"] = app
        # The application owns the version store connection it opened
        ctx.find_root().call_on_close(app.close)
    return app


@click.group()
@click.version_option(package_name="pymig")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ./pymig.yaml or $PYMIG_CONFIG).",
)
@click.option(
    "--migrations-path",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Override the default migrations directory.",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    migrations_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """pymig - Resolve and run versioned schema migrations."""
    ctx.ensure_object(dict)

    # Preserve a config injected by tests
    if "config" not in ctx.obj:
        with handle_errors():
            ctx.obj["config"] = get_config(
                config_path=config_path,
                overrides=ConfigSource(migrations_path=migrations_path),
            )

    config = get_config_from_context(ctx)
    _configure_logging(config, log_level, log_file, log_json)

    logger.debug(
        "pymig starting: config=%s, adapter=%s (%s)",
        config.config_path or "defaults",
        config.adapter.type,
        config.adapter.path,
    )


# Defer import to avoid circular dependency
def _register_commands() -> None:
    from pymig.cli.generate import generate_command
    from pymig.cli.init import init_command
    from pymig.cli.migrate import (
        down_command,
        migrate_command,
        redo_command,
        rollback_command,
        up_command,
    )
    from pymig.cli.status import check_command, status_command

    main.add_command(init_command)
    main.add_command(status_command)
    main.add_command(check_command)
    main.add_command(generate_command)
    main.add_command(migrate_command)
    main.add_command(rollback_command)
    main.add_command(up_command)
    main.add_command(down_command)
    main.add_command(redo_command)


_register_commands()
