"""Migration collections.

A collection aggregates migration locators from explicit lists and
directory scans and annotates each one with the collection's options.
Several collections can be combined by the application; deduplication is
left to the resolver.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from pymig.exceptions import InvalidSourceError
from pymig.migration.descriptor import (
    DEFAULT_NAMESPACE,
    MigrationDescriptor,
    parse_descriptor,
)

logger = logging.getLogger(__name__)

MIGRATION_FILE_PATTERN = "*.py"


@dataclass(frozen=True)
class CollectionOptions:
    """Options applied to every descriptor of a collection."""

    namespace: str = DEFAULT_NAMESPACE
    version_prefix: str = ""


class MigrationCollection:
    """Registry of migration locators sharing one set of options.

    Example:
        collection = MigrationCollection(namespace="billing",
                                         version_prefix="billing_")
        collection.add_path(Path("modules/billing/migrations"))
        descriptors = collection.get_descriptors()
    """

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        version_prefix: str = "",
    ) -> None:
        self._options = CollectionOptions(
            namespace=namespace, version_prefix=version_prefix
        )
        self._locators: list[str] = []

    @property
    def options(self) -> CollectionOptions:
        return self._options

    @property
    def locators(self) -> list[str]:
        return list(self._locators)

    def add_migrations(self, locators: Iterable[str | Path] | str | Path) -> None:
        """Append explicit migration locators.

        Args:
            locators: A single locator or an iterable of locators.
        """
        if isinstance(locators, (str, Path)):
            locators = [locators]
        self._locators.extend(str(locator) for locator in locators)

    def add_path(self, path: Path | str) -> None:
        """Append every migration file found directly inside a directory.

        Args:
            path: Directory to scan (non-recursive).

        Raises:
            InvalidSourceError: If path is not a readable directory.
        """
        directory = Path(path)
        if not directory.is_dir() or not os.access(directory, os.R_OK | os.X_OK):
            raise InvalidSourceError(directory)

        directory = directory.resolve()
        found = sorted(
            p for p in directory.glob(MIGRATION_FILE_PATTERN) if p.is_file()
        )
        logger.debug("Found %d migration files in %s", len(found), directory)
        self._locators.extend(str(p) for p in found)

    def get_descriptors(self) -> list[MigrationDescriptor]:
        """Return descriptors for every locator carrying a version.

        Locators whose base name lacks a leading digit run are skipped;
        unrelated files may live next to migrations.
        """
        descriptors: list[MigrationDescriptor] = []
        for locator in self._locators:
            descriptor = parse_descriptor(
                locator,
                namespace=self._options.namespace,
                version_prefix=self._options.version_prefix,
            )
            if descriptor is None:
                logger.debug("Skipping non-migration file: %s", locator)
                continue
            descriptors.append(descriptor)
        return descriptors

    def __len__(self) -> int:
        return len(self._locators)
