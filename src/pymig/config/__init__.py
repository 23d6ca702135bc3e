"""Configuration management for pymig.

Configuration is loaded with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (PYMIG_*)
3. Config file (./pymig.yaml)
4. Default values (lowest priority)
"""

from pymig.config.builder import ConfigBuilder, ConfigSource, source_from_env
from pymig.config.env import EnvReader
from pymig.config.loader import (
    ConfigError,
    get_config,
    get_default_config_path,
    load_config_file,
    parse_config,
)
from pymig.config.models import (
    AdapterConfig,
    CollectionConfig,
    LoggingConfig,
    PymigConfig,
)

__all__ = [
    # Models
    "AdapterConfig",
    "CollectionConfig",
    "LoggingConfig",
    "PymigConfig",
    # Loader
    "ConfigError",
    "get_config",
    "get_default_config_path",
    "load_config_file",
    "parse_config",
    # Layering
    "ConfigBuilder",
    "ConfigSource",
    "EnvReader",
    "source_from_env",
]
