"""Configuration models for pymig.

Runtime configuration is held in dataclasses validated in
__post_init__. The YAML file is validated separately by the pydantic models
in ``pymig.config.schema`` before it is turned into these.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

ADAPTER_TYPES = frozenset({"sqlite", "file"})


@dataclass
class AdapterConfig:
    """Version store settings."""

    # sqlite or file
    type: str = "sqlite"

    # Database file (sqlite) or version log (file)
    path: Path = Path("migrations.db")

    # Table holding applied versions (sqlite only)
    table: str = "migrations"

    def __post_init__(self) -> None:
        if self.type.lower() not in ADAPTER_TYPES:
            raise ValueError(
                f"adapter type must be one of {sorted(ADAPTER_TYPES)}, got {self.type}"
            )
        self.type = self.type.lower()


@dataclass
class CollectionConfig:
    """One migration collection: where to look and how to qualify it."""

    path: Path | None = None
    migrations: list[Path] = field(default_factory=list)
    namespace: str = "root"
    version_prefix: str = ""


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class PymigConfig:
    """Complete pymig configuration."""

    adapter: AdapterConfig = field(default_factory=AdapterConfig)
    collections: list[CollectionConfig] = field(default_factory=list)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # File the configuration was read from, if any
    config_path: Path | None = None

    @property
    def migrations_path(self) -> Path | None:
        """Directory of the default collection, used by ``generate``."""
        for collection in self.collections:
            if collection.path is not None:
                return collection.path
        return None
