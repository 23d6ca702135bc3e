"""Version store adapters."""

from __future__ import annotations

from pymig.adapter.base import VersionStore
from pymig.adapter.file import FileAdapter
from pymig.adapter.sqlite import SqliteAdapter, connect
from pymig.config.models import AdapterConfig


def create_adapter(config: AdapterConfig) -> VersionStore:
    """Create the version store described by the adapter configuration.

    Args:
        config: Adapter section of the configuration.

    Returns:
        A ready-to-use VersionStore.

    Raises:
        ValueError: If the adapter type is unknown.
    """
    if config.type == "sqlite":
        return SqliteAdapter(connect(config.path), table=config.table)
    if config.type == "file":
        return FileAdapter(config.path)
    raise ValueError(f"Unknown adapter type: {config.type}")


__all__ = [
    "FileAdapter",
    "SqliteAdapter",
    "VersionStore",
    "connect",
    "create_adapter",
]
