"""Resolve which migrations run, and in which direction.

Direction is derived from the versions: moving to a higher version runs
``up``, moving to a lower one runs ``down``. An UP pass skips migrations that
are already applied; a DOWN pass only reverts migrations that are recorded
as applied, within the half-open range ``(to, from]``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from enum import Enum

from pymig.exceptions import DuplicateVersionError
from pymig.migration.descriptor import MigrationDescriptor, version_number

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    """Direction of travel between two versions."""

    UP = "up"
    DOWN = "down"


def get_direction(from_version: int, to_version: int | None) -> Direction:
    if to_version is None or to_version > from_version:
        return Direction.UP
    return Direction.DOWN


def check_unique_versions(descriptors: Iterable[MigrationDescriptor]) -> None:
    """Raise DuplicateVersionError if two descriptors share a version number."""
    seen: dict[int, MigrationDescriptor] = {}
    for descriptor in descriptors:
        existing = seen.get(descriptor.number)
        if existing is not None:
            raise DuplicateVersionError(
                descriptor.version, descriptor.locator, existing.locator
            )
        seen[descriptor.number] = descriptor


def sort_descriptors(
    descriptors: Iterable[MigrationDescriptor], direction: Direction
) -> list[MigrationDescriptor]:
    return sorted(
        descriptors,
        key=lambda d: (d.number, d.locator),
        reverse=direction is Direction.DOWN,
    )


def resolve(
    descriptors: Sequence[MigrationDescriptor],
    applied_versions: Iterable[str],
    from_version: str | int | None,
    to_version: str | int | None = None,
    direction: Direction | None = None,
) -> tuple[Direction, list[MigrationDescriptor]]:
    """Compute the ordered descriptors needed to move between two versions.

    Args:
        descriptors: All known descriptors, from every collection.
        applied_versions: Prefixed versions recorded by the version store.
        from_version: Current version (stored form or number).
        to_version: Target version, or None for "everything".
        direction: Force a direction instead of deriving it from the
            versions. A forced DOWN with no target reverts down to 0.

    Returns:
        Tuple of (direction, descriptors in execution order).

    Raises:
        DuplicateVersionError: If two descriptors share a version number.
    """
    check_unique_versions(descriptors)

    applied = set(applied_versions)
    start = version_number(from_version)
    target = None if to_version is None else version_number(to_version)
    if direction is None:
        direction = get_direction(start, target)
    elif direction is Direction.DOWN and target is None:
        target = 0

    selected: list[MigrationDescriptor] = []
    for descriptor in sort_descriptors(descriptors, direction):
        number = descriptor.number
        if direction is Direction.UP:
            if target is not None and number > target:
                continue
            if descriptor.prefixed_version not in applied:
                selected.append(descriptor)
        else:
            if number > start or number <= target:
                continue
            if descriptor.prefixed_version in applied:
                selected.append(descriptor)

    logger.debug(
        "Resolved %d migration(s) %s from %s to %s",
        len(selected),
        direction.value,
        start,
        "latest" if target is None else target,
    )
    return direction, selected
