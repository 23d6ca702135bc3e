"""Turn resolved descriptors into executable migration instances."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pymig.exceptions import (
    DuplicateImplementationError,
    DuplicateVersionError,
    ImplementationNotFoundError,
    InvalidDescriptorError,
    InvalidImplementationError,
)
from pymig.migration.base import Migration
from pymig.migration.descriptor import MigrationDescriptor, extract_version
from pymig.migration.output import NullOutput, OutputSink
from pymig.migration.registry import MigrationTypeRegistry, get_default_registry

logger = logging.getLogger(__name__)


class MigrationLoader:
    """Instantiate migrations for an ordered batch of descriptors."""

    def __init__(
        self,
        registry: MigrationTypeRegistry | None = None,
        output: OutputSink | None = None,
    ) -> None:
        self._registry = registry if registry is not None else get_default_registry()
        self._output = output if output is not None else NullOutput()

    @property
    def registry(self) -> MigrationTypeRegistry:
        return self._registry

    def load(self, descriptors: Iterable[MigrationDescriptor]) -> dict[int, Migration]:
        """Load a batch of descriptors.

        Args:
            descriptors: Descriptors in execution order.

        Returns:
            Mapping of numeric version to migration instance, in input order.

        Raises:
            InvalidDescriptorError: If a locator has no leading digit run.
            DuplicateVersionError: If two descriptors share a version.
            DuplicateImplementationError: If two descriptors map to the same
                qualified class name.
            ImplementationNotFoundError: If no class can be resolved.
            InvalidImplementationError: If the class is not a Migration.
        """
        migrations: dict[int, Migration] = {}
        names: dict[str, str] = {}

        for descriptor in descriptors:
            if extract_version(descriptor.locator) is None:
                raise InvalidDescriptorError(descriptor.locator)

            number = descriptor.number
            if number in migrations:
                raise DuplicateVersionError(
                    descriptor.version,
                    descriptor.locator,
                    migrations[number].name,
                )

            qualified_name = descriptor.qualified_name
            if qualified_name in names:
                raise DuplicateImplementationError(
                    qualified_name, descriptor.locator, names[qualified_name]
                )
            names[qualified_name] = descriptor.locator

            migration = self._instantiate(descriptor)
            migration.set_output(self._output)
            migrations[number] = migration
            logger.debug(
                "Loaded migration %s (%s)", migration.version, qualified_name
            )

        return migrations

    def resolve_class(self, descriptor: MigrationDescriptor) -> type[Migration]:
        """Find the class implementing a descriptor without instantiating it.

        Raises:
            ImplementationNotFoundError: If no class can be resolved.
            InvalidImplementationError: If the migration file defines the
                class but it does not extend Migration.
        """
        qualified_name = descriptor.qualified_name
        cls = self._registry.get(qualified_name)

        if cls is None:
            path = Path(descriptor.locator)
            if path.suffix == ".py" and path.is_file():
                module = self._registry.scan_file(path, descriptor.namespace)
                cls = self._registry.get(qualified_name)
                if cls is None and isinstance(
                    getattr(module, descriptor.class_name, None), type
                ):
                    raise InvalidImplementationError(
                        qualified_name, descriptor.locator
                    )

        if cls is None:
            raise ImplementationNotFoundError(qualified_name, descriptor.locator)
        return cls

    def _instantiate(self, descriptor: MigrationDescriptor) -> Migration:
        migration = self.resolve_class(descriptor)(descriptor.prefixed_version)
        # A class overriding __new__ can still hand back something else
        if not isinstance(migration, Migration):
            raise InvalidImplementationError(
                descriptor.qualified_name, descriptor.locator
            )
        return migration
