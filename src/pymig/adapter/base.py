"""Version store interface.

A version store records which migration versions have been applied. The
engine reads it once per run; migrations are recorded one by one through
up()/down() as they complete.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pymig.migration.base import Migration


@runtime_checkable
class VersionStore(Protocol):
    """Persistent record of applied migration versions."""

    def fetch_all(self) -> list[str]:
        """Return every applied (prefixed) version."""
        ...

    def has_schema(self) -> bool:
        """Return True if the bookkeeping structure exists."""
        ...

    def create_schema(self) -> None:
        """Create the bookkeeping structure. Must be idempotent."""
        ...

    def up(self, migration: Migration) -> None:
        """Record migration.version as applied."""
        ...

    def down(self, migration: Migration) -> None:
        """Remove migration.version from the applied record."""
        ...

    def close(self) -> None:
        """Release resources held by the store."""
        ...
