"""pymig: versioned schema migrations.

Resolves which migrations are needed to move a store between two versions,
loads them, and runs their up/down steps in order.
"""

from pymig.api import (
    MigrationApplication,
    MigrationStatus,
    create_application,
)
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
from pymig.migration import (
    BufferedOutput,
    ClickOutput,
    Direction,
    Migration,
    MigrationCollection,
    MigrationDescriptor,
    MigrationTypeRegistry,
    register_migration,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Application
    "MigrationApplication",
    "MigrationStatus",
    "create_application",
    # Migrations
    "BufferedOutput",
    "ClickOutput",
    "Direction",
    "Migration",
    "MigrationCollection",
    "MigrationDescriptor",
    "MigrationTypeRegistry",
    "register_migration",
    # Errors
    "DuplicateImplementationError",
    "DuplicateVersionError",
    "ImplementationNotFoundError",
    "InvalidDescriptorError",
    "InvalidImplementationError",
    "InvalidSourceError",
    "InvalidVersionError",
    "MigrationError",
    "MissingAdapterError",
]
