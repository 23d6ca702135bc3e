"""Migration discovery, resolution, loading and execution."""

from pymig.migration.base import Migration
from pymig.migration.collection import CollectionOptions, MigrationCollection
from pymig.migration.descriptor import (
    MigrationDescriptor,
    migration_to_class_name,
    parse_descriptor,
    version_number,
)
from pymig.migration.loader import MigrationLoader
from pymig.migration.migrator import Migrator
from pymig.migration.output import BufferedOutput, ClickOutput, NullOutput, OutputSink
from pymig.migration.registry import (
    MigrationTypeRegistry,
    get_default_registry,
    register_migration,
)
from pymig.migration.resolver import Direction, resolve

__all__ = [
    "BufferedOutput",
    "ClickOutput",
    "CollectionOptions",
    "Direction",
    "Migration",
    "MigrationCollection",
    "MigrationDescriptor",
    "MigrationLoader",
    "MigrationTypeRegistry",
    "Migrator",
    "NullOutput",
    "OutputSink",
    "get_default_registry",
    "migration_to_class_name",
    "parse_descriptor",
    "register_migration",
    "resolve",
    "version_number",
]
