"""Configuration builder with explicit layering.

ConfigBuilder composes PymigConfig from several ConfigSources. Later
sources override earlier ones for every value they set.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from pymig.config.env import EnvReader
from pymig.config.models import (
    AdapterConfig,
    CollectionConfig,
    LoggingConfig,
    PymigConfig,
)
from pymig.config.schema import ConfigFileModel


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values mean "not specified in this source" and never override
    values from lower-precedence sources.
    """

    # Adapter
    adapter_type: str | None = None
    adapter_path: Path | None = None
    adapter_table: str | None = None

    # Default collection directory
    migrations_path: Path | None = None

    # Logging
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds PymigConfig by layering ConfigSources with precedence.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(model, base_dir))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._migrations: list[Path] = []
        self._collections: list[CollectionConfig] = []

    def apply(self, source: ConfigSource) -> None:
        """Apply a source; its non-None values override existing ones."""
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def set_default_migrations(self, migrations: list[Path]) -> None:
        """Explicit files of the default collection (config file only)."""
        self._migrations = list(migrations)

    def add_collection(self, collection: CollectionConfig) -> None:
        """Extra collection (config file only)."""
        self._collections.append(collection)

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self, config_path: Path | None = None) -> PymigConfig:
        """Build the final PymigConfig with defaults for unset values.

        Raises:
            ValueError: If a layered value fails model validation.
        """
        adapter = AdapterConfig(
            type=self._get("adapter_type", "sqlite"),
            path=self._get("adapter_path", Path("migrations.db")),
            table=self._get("adapter_table", "migrations"),
        )

        logging_config = LoggingConfig(
            level=self._get("logging_level", "info"),
            file=self._get("logging_file", None),
            format=self._get("logging_format", "text"),
            include_stderr=self._get("logging_include_stderr", False),
            max_bytes=self._get("logging_max_bytes", 10_485_760),
            backup_count=self._get("logging_backup_count", 5),
        )

        collections: list[CollectionConfig] = []
        migrations_path = self._get("migrations_path", None)
        if migrations_path is None and not self._migrations and not self._collections:
            migrations_path = Path("migrations")
        if migrations_path is not None or self._migrations:
            collections.append(
                CollectionConfig(path=migrations_path, migrations=self._migrations)
            )
        collections.extend(self._collections)

        return PymigConfig(
            adapter=adapter,
            collections=collections,
            logging=logging_config,
            config_path=config_path,
        )


def _resolve(base_dir: Path, value: str | None) -> Path | None:
    if value is None:
        return None
    path = Path(value).expanduser()
    return path if path.is_absolute() else base_dir / path


def source_from_file(model: ConfigFileModel, base_dir: Path) -> ConfigSource:
    """Create a ConfigSource from a validated config file.

    Relative paths are resolved against the config file's directory.
    """
    return ConfigSource(
        adapter_type=model.adapter.type,
        adapter_path=_resolve(base_dir, model.adapter.path),
        adapter_table=model.adapter.table,
        migrations_path=_resolve(base_dir, model.migrations_path),
        logging_level=model.logging.level,
        logging_file=_resolve(base_dir, model.logging.file),
        logging_format=model.logging.format,
        logging_include_stderr=model.logging.include_stderr,
        logging_max_bytes=model.logging.max_bytes,
        logging_backup_count=model.logging.backup_count,
    )


def collections_from_file(
    model: ConfigFileModel, base_dir: Path
) -> list[CollectionConfig]:
    """Extra collections declared under ``collections``."""
    return [
        CollectionConfig(
            path=_resolve(base_dir, entry.path),
            migrations=[_resolve(base_dir, m) for m in entry.migrations],
            namespace=entry.namespace,
            version_prefix=entry.version_prefix,
        )
        for entry in model.collections
    ]


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create a ConfigSource from PYMIG_* environment variables."""
    return ConfigSource(
        adapter_type=reader.get_str("PYMIG_ADAPTER"),
        adapter_path=reader.get_path("PYMIG_DATABASE_PATH"),
        adapter_table=reader.get_str("PYMIG_TABLE"),
        migrations_path=reader.get_path("PYMIG_MIGRATIONS_PATH"),
        logging_level=reader.get_str("PYMIG_LOG_LEVEL"),
        logging_file=reader.get_path("PYMIG_LOG_FILE"),
        logging_format=reader.get_str("PYMIG_LOG_FORMAT"),
    )
