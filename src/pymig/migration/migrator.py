"""Execute single migrations and record the result in the version store."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pymig.logging.context import migration_context
from pymig.migration.output import NullOutput, OutputSink
from pymig.migration.resolver import Direction

if TYPE_CHECKING:
    from pymig.adapter.base import VersionStore
    from pymig.migration.base import Migration

logger = logging.getLogger(__name__)

_PROGRESS = {
    Direction.UP: ("migrating", "migrated"),
    Direction.DOWN: ("reverting", "reverted"),
}


class Migrator:
    """Runs one migration at a time against a version store.

    Errors raised by the migration propagate unchanged and the version is
    not recorded.
    """

    def __init__(
        self,
        adapter: VersionStore,
        output: OutputSink | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self._adapter = adapter
        self._output = output if output is not None else NullOutput()
        self._context: Mapping[str, Any] = dict(context or {})

    @property
    def adapter(self) -> VersionStore:
        return self._adapter

    def up(self, migration: Migration) -> None:
        """Apply a migration and record its version."""
        self._run(migration, Direction.UP)

    def down(self, migration: Migration) -> None:
        """Revert a migration and remove its version."""
        self._run(migration, Direction.DOWN)

    def _run(self, migration: Migration, direction: Direction) -> None:
        started, finished = _PROGRESS[direction]
        self._output.write(f" == {migration.version} {migration.name} {started}")

        start = time.perf_counter()
        with migration_context(migration.version, migration.name, direction.value):
            logger.info("Running %s for %s", direction.value, migration.name)
            migration.set_context(self._context)
            migration.init()
            if direction is Direction.UP:
                migration.pre_up()
                migration.up()
                migration.post_up()
                self._adapter.up(migration)
            else:
                migration.pre_down()
                migration.down()
                migration.post_down()
                self._adapter.down(migration)
        elapsed = time.perf_counter() - start

        logger.info(
            "Migration %s %s %s in %.3fs",
            migration.version,
            migration.name,
            finished,
            elapsed,
        )
        self._output.write(
            f" == {migration.version} {migration.name} {finished} {elapsed:.4f}s"
        )
