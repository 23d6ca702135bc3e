"""Migration application: the programmatic entry point.

Usage:
    from pymig import BufferedOutput, MigrationApplication, MigrationCollection
    from pymig.adapter import FileAdapter

    collection = MigrationCollection()
    collection.add_path("migrations")

    output = BufferedOutput()
    app = MigrationApplication(FileAdapter(".migrations.log"), output, [collection])
    app.up()              # upgrade to the latest version
    app.down(20230101)    # revert everything above 20230101
    print(output.fetch())
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pymig.adapter import SqliteAdapter, create_adapter
from pymig.adapter.base import VersionStore
from pymig.config.models import PymigConfig
from pymig.exceptions import InvalidVersionError, MissingAdapterError
from pymig.migration.base import Migration
from pymig.migration.collection import MigrationCollection
from pymig.migration.descriptor import MigrationDescriptor, version_number
from pymig.migration.loader import MigrationLoader
from pymig.migration.migrator import Migrator
from pymig.migration.output import NullOutput, OutputSink
from pymig.migration.registry import MigrationTypeRegistry, get_default_registry
from pymig.migration.resolver import (
    Direction,
    check_unique_versions,
    resolve,
)

logger = logging.getLogger(__name__)

# Returned by get_version() when nothing has been applied
NO_VERSION = "0"


@dataclass(frozen=True)
class MigrationStatus:
    """One row of the status listing."""

    version: str
    name: str | None
    applied: bool
    missing: bool = False
    locator: str | None = None
    description: str = ""

    @property
    def number(self) -> int:
        return version_number(self.version)


def parse_target(version: str | int | None, *, allow_none: bool) -> int | None:
    """Validate a requested target version.

    Raises:
        InvalidVersionError: If the version is None (when not allowed),
            negative or not a number.
    """
    if version is None:
        if allow_none:
            return None
        raise InvalidVersionError(version)
    if isinstance(version, bool):
        raise InvalidVersionError(version, "expected a version number")
    if isinstance(version, str):
        text = version.strip()
        if not text.lstrip("-").isdigit():
            raise InvalidVersionError(version, "expected a version number")
        version = int(text)
    if version < 0:
        raise InvalidVersionError(version)
    return version


class MigrationApplication:
    """Resolves and runs migrations between versions.

    All collaborators are passed explicitly: the version store, the output
    sink, the migration collections, and optionally the class registry, the
    migrator and a context mapping handed to every migration.
    """

    def __init__(
        self,
        adapter: VersionStore | None,
        output: OutputSink | None = None,
        collections: Iterable[MigrationCollection] = (),
        *,
        registry: MigrationTypeRegistry | None = None,
        migrator: Migrator | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self._adapter = adapter
        self._output = output if output is not None else NullOutput()
        self._collections = list(collections)
        self._loader = MigrationLoader(registry=registry, output=self._output)
        self._context = dict(context or {})
        self._migrator = migrator

    @property
    def adapter(self) -> VersionStore | None:
        return self._adapter

    @property
    def output(self) -> OutputSink:
        return self._output

    @property
    def collections(self) -> list[MigrationCollection]:
        return list(self._collections)

    @property
    def loader(self) -> MigrationLoader:
        return self._loader

    def add_collection(self, collection: MigrationCollection) -> None:
        self._collections.append(collection)

    def close(self) -> None:
        """Close the version store."""
        if self._adapter is not None:
            self._adapter.close()

    def _require_adapter(self) -> VersionStore:
        if self._adapter is None:
            raise MissingAdapterError()
        return self._adapter

    def _get_migrator(self) -> Migrator:
        if self._migrator is None:
            self._migrator = Migrator(
                self._require_adapter(), self._output, self._context
            )
        return self._migrator

    def _ensure_schema(self) -> VersionStore:
        adapter = self._require_adapter()
        if not adapter.has_schema():
            logger.info("Version store not initialized, creating schema")
            adapter.create_schema()
        return adapter

    def _applied_versions(self) -> list[str]:
        adapter = self._require_adapter()
        if not adapter.has_schema():
            return []
        return adapter.fetch_all()

    def get_descriptors(self) -> list[MigrationDescriptor]:
        """Descriptors of every collection, in collection order."""
        descriptors: list[MigrationDescriptor] = []
        for collection in self._collections:
            descriptors.extend(collection.get_descriptors())
        return descriptors

    def get_version(self) -> str:
        """Return the highest applied version, or "0" if none is applied.

        Versions are returned in their stored (prefixed) form, so the empty
        store is reported as the string "0" rather than the integer 0. Pass
        the result through version_number() before comparing it.
        """
        versions = sorted(self._applied_versions(), key=version_number)
        if versions:
            return versions[-1]
        return NO_VERSION

    def get_migrations(
        self,
        from_version: str | int | None,
        to_version: str | int | None = None,
        direction: Direction | None = None,
    ) -> dict[int, Migration]:
        """Resolve and load the migrations needed to go from one version to another.

        Args:
            from_version: Current version.
            to_version: Target version, or None for the latest.
            direction: Force a direction; derived from the versions if None.

        Returns:
            Mapping of numeric version to migration, in execution order.
        """
        direction, descriptors = resolve(
            self.get_descriptors(),
            self._applied_versions(),
            from_version,
            to_version,
            direction,
        )
        migrations = self._loader.load(descriptors)
        logger.debug(
            "Loaded %d migration(s) to run %s", len(migrations), direction.value
        )
        return migrations

    def up(self, version: str | int | None = None) -> list[Migration]:
        """Migrate up to a version (default: latest).

        Returns:
            The migrations that were applied, in order.

        Raises:
            MissingAdapterError: If no version store is configured.
            InvalidVersionError: If version is negative or not a number.
        """
        target = parse_target(version, allow_none=True)
        self._ensure_schema()

        pending = self.get_migrations(self.get_version(), target, Direction.UP)
        migrations = list(pending.values())
        migrator = self._get_migrator()
        for migration in migrations:
            migrator.up(migration)
        return migrations

    def down(self, version: str | int | None = 0) -> list[Migration]:
        """Migrate down to a version, reverting everything above it.

        Returns:
            The migrations that were reverted, in order.

        Raises:
            InvalidVersionError: If version is None, negative or not a number.
            MissingAdapterError: If no version store is configured.
        """
        target = parse_target(version, allow_none=False)
        self._require_adapter()

        pending = self.get_migrations(self.get_version(), target, Direction.DOWN)
        migrations = list(pending.values())
        migrator = self._get_migrator()
        for migration in migrations:
            migrator.down(migration)
        return migrations

    def rollback(self, version: str | int | None = None) -> list[Migration]:
        """Revert to a version, or revert only the latest migration.

        Without a version, the target is the previously applied version
        (or 0 if only one migration is applied).
        """
        if version is not None:
            return self.down(version)

        applied = sorted(self._applied_versions(), key=version_number)
        if not applied:
            return []
        target = version_number(applied[-2]) if len(applied) > 1 else 0
        return self.down(target)

    def _find_descriptor(self, version: str | int) -> MigrationDescriptor:
        number = parse_target(version, allow_none=False)
        descriptors = self.get_descriptors()
        check_unique_versions(descriptors)
        for descriptor in descriptors:
            if descriptor.number == number:
                return descriptor
        raise InvalidVersionError(version, "no migration with this version")

    def up_version(self, version: str | int) -> bool:
        """Apply exactly one migration if it is not applied yet.

        Returns:
            True if the migration ran.
        """
        descriptor = self._find_descriptor(version)
        self._ensure_schema()
        if descriptor.prefixed_version in self._applied_versions():
            logger.info("Migration %s is already applied", descriptor.prefixed_version)
            return False

        migration = self._loader.load([descriptor])[descriptor.number]
        self._get_migrator().up(migration)
        return True

    def down_version(self, version: str | int) -> bool:
        """Revert exactly one migration if it is applied.

        Returns:
            True if the migration ran.
        """
        descriptor = self._find_descriptor(version)
        if descriptor.prefixed_version not in self._applied_versions():
            logger.info("Migration %s is not applied", descriptor.prefixed_version)
            return False

        migration = self._loader.load([descriptor])[descriptor.number]
        self._get_migrator().down(migration)
        return True

    def redo(self, version: str | int) -> None:
        """Revert and re-apply one migration."""
        self.down_version(version)
        self.up_version(version)

    def get_pending(self) -> list[MigrationDescriptor]:
        """Descriptors that are not applied, in ascending order."""
        _, pending = resolve(self.get_descriptors(), self._applied_versions(), 0)
        return pending

    def get_status(self) -> list[MigrationStatus]:
        """Status of every known migration plus applied versions without one.

        Each migration's class is resolved (importing its file if needed)
        to read its description; nothing is instantiated or run.

        Raises:
            ImplementationNotFoundError: If a migration file lacks its class.
            InvalidImplementationError: If the class is not a Migration.
        """
        descriptors = self.get_descriptors()
        check_unique_versions(descriptors)
        applied = self._applied_versions()
        applied_set = set(applied)

        rows = [
            MigrationStatus(
                version=d.prefixed_version,
                name=d.class_name,
                applied=d.prefixed_version in applied_set,
                locator=d.locator,
                description=self._loader.resolve_class(d).description,
            )
            for d in descriptors
        ]
        known = {d.prefixed_version for d in descriptors}
        rows.extend(
            MigrationStatus(version=v, name=None, applied=True, missing=True)
            for v in applied
            if v not in known
        )
        return sorted(rows, key=lambda row: (row.number, row.version))


def build_collections(config: PymigConfig) -> list[MigrationCollection]:
    """Create the migration collections described by the configuration.

    Raises:
        InvalidSourceError: If a configured directory is not readable.
    """
    collections = []
    for entry in config.collections:
        collection = MigrationCollection(
            namespace=entry.namespace, version_prefix=entry.version_prefix
        )
        if entry.migrations:
            collection.add_migrations(entry.migrations)
        if entry.path is not None:
            collection.add_path(entry.path)
        collections.append(collection)
    return collections


def create_application(
    config: PymigConfig,
    output: OutputSink | None = None,
    registry: MigrationTypeRegistry | None = None,
) -> MigrationApplication:
    """Wire a MigrationApplication from configuration.

    Classes registered with register_migration are visible to the
    application; classes imported from migration files are kept in the
    application's own registry.

    Migrations receive a context with the version store under ``"adapter"``,
    the configuration under ``"config"`` and, for the SQLite store, the open
    connection under ``"connection"``.
    """
    if registry is None:
        registry = get_default_registry().copy()

    adapter = create_adapter(config.adapter)
    context: dict[str, Any] = {"adapter": adapter, "config": config}
    if isinstance(adapter, SqliteAdapter):
        context["connection"] = adapter.connection

    return MigrationApplication(
        adapter,
        output,
        build_collections(config),
        registry=registry,
        context=context,
    )
