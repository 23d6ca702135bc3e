"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed as a ConfigSource)
2. Environment variables (PYMIG_*)
3. Config file (./pymig.yaml, or PYMIG_CONFIG)
4. Default values

Environment variables:
- PYMIG_CONFIG: Path to config file (overrides ./pymig.yaml)
- PYMIG_ADAPTER: Version store type (sqlite or file)
- PYMIG_DATABASE_PATH: Database file or version log path
- PYMIG_TABLE: Table holding applied versions (sqlite)
- PYMIG_MIGRATIONS_PATH: Directory of the default migration collection
- PYMIG_LOG_LEVEL: debug, info, warning or error
- PYMIG_LOG_FILE: Log file path
- PYMIG_LOG_FORMAT: text or json
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from pymig.config.builder import (
    ConfigBuilder,
    ConfigSource,
    collections_from_file,
    source_from_env,
    source_from_file,
)
from pymig.config.env import EnvReader
from pymig.config.models import PymigConfig
from pymig.config.schema import ConfigFileModel

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "pymig.yaml"


class ConfigError(Exception):
    """Configuration file is missing, unreadable or invalid."""


def get_default_config_path(env: EnvReader | None = None) -> Path:
    """Get the default config file path.

    Can be overridden by the PYMIG_CONFIG environment variable.
    """
    reader = env or EnvReader()
    return reader.get_path("PYMIG_CONFIG") or Path.cwd() / DEFAULT_CONFIG_FILE


def _format_validation_error(error: ValidationError) -> str:
    """Turn pydantic errors into one readable line per problem."""
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        messages.append(f"{location}: {item['msg']}")
    return "; ".join(messages)


def parse_config(data: dict[str, Any]) -> ConfigFileModel:
    """Validate configuration data.

    Raises:
        ConfigError: If the data does not match the config schema.
    """
    try:
        return ConfigFileModel.model_validate(data)
    except ValidationError as e:
        message = _format_validation_error(e)
        raise ConfigError(f"Invalid configuration: {message}") from e


def load_config_file(path: Path) -> ConfigFileModel:
    """Load and validate a YAML config file.

    Args:
        path: Path to the config file.

    Returns:
        Validated config file model. An empty file yields the defaults.

    Raises:
        ConfigError: If the file cannot be read or is invalid.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must be a YAML mapping")

    return parse_config(data)


def get_config(
    config_path: Path | None = None,
    env: EnvReader | None = None,
    overrides: ConfigSource | None = None,
) -> PymigConfig:
    """Build the effective configuration.

    Args:
        config_path: Explicit config file. Must exist when given.
        env: Environment reader (defaults to os.environ).
        overrides: Values from CLI options.

    Returns:
        Effective PymigConfig.

    Raises:
        ConfigError: If the config file is invalid or a value is rejected.
    """
    reader = env or EnvReader()
    explicit = config_path is not None
    path = config_path if explicit else get_default_config_path(reader)

    builder = ConfigBuilder()
    loaded_from: Path | None = None

    if path.is_file():
        model = load_config_file(path)
        base_dir = path.resolve().parent
        builder.apply(source_from_file(model, base_dir))
        builder.set_default_migrations(
            [
                p if p.is_absolute() else base_dir / p
                for p in (Path(m).expanduser() for m in model.migrations)
            ]
        )
        for collection in collections_from_file(model, base_dir):
            builder.add_collection(collection)
        loaded_from = path
        logger.debug("Loaded config file %s", path)
    elif explicit:
        raise ConfigError(f"Config file not found: {path}")

    builder.apply(source_from_env(reader))
    if overrides is not None:
        builder.apply(overrides)

    try:
        return builder.build(config_path=loaded_from)
    except ValueError as e:
        raise ConfigError(str(e)) from e
