"""Migration descriptors and version helpers.

A descriptor is the metadata for one discoverable migration before it is
instantiated: where it lives, which version it carries, and the options of
the collection it came from.

Filenames follow ``<digits>[_<name>][.<ext>]``, e.g. ``20230101_create_users.py``.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

# Leading digit run of a migration base name
_VERSION_RE = re.compile(r"^[0-9]+")

# Trailing digit run of a stored (possibly prefixed) version
_STORED_VERSION_RE = re.compile(r"([0-9]+)$")

_NAME_PREFIX_RE = re.compile(r"^[0-9]+_")

DEFAULT_NAMESPACE = "root"


def extract_version(locator: str) -> str | None:
    """Return the leading digit run of the locator's base name, if any."""
    match = _VERSION_RE.match(os.path.basename(locator))
    return match.group(0) if match else None


def version_number(value: str | int | None) -> int:
    """Normalize a stored or requested version to its numeric ordering key.

    Stored versions may carry an opaque prefix (``billing_20230101``); only
    the trailing digit run takes part in ordering. Values without digits
    order as 0.

    Args:
        value: Stored version string, bare number, or None.

    Returns:
        Integer ordering key.
    """
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    match = _STORED_VERSION_RE.search(value.strip())
    return int(match.group(1)) if match else 0


def migration_to_class_name(name_part: str) -> str:
    """Transform ``create_table_user`` to ``CreateTableUser``.

    Only the first letter of each word is upper-cased; the rest of the word
    is kept as written.
    """
    words = name_part.replace("_", " ").split()
    return "".join(word[:1].upper() + word[1:] for word in words)


def migration_name_part(locator: str) -> str:
    """Strip the ``<digits>_`` prefix and any extension from the base name."""
    name = _NAME_PREFIX_RE.sub("", os.path.basename(locator), count=1)
    if "." in name:
        name = name[: name.index(".")]
    return name


@dataclass(frozen=True)
class MigrationDescriptor:
    """Metadata for one migration unit, annotated with collection options."""

    locator: str
    version: str
    name_part: str
    namespace: str = DEFAULT_NAMESPACE
    version_prefix: str = ""

    @property
    def number(self) -> int:
        """Numeric ordering key."""
        return int(self.version)

    @property
    def prefixed_version(self) -> str:
        """Version as stored by the version store."""
        return f"{self.version_prefix}{self.version}"

    @property
    def class_name(self) -> str:
        """Canonical implementation class name."""
        return migration_to_class_name(self.name_part)

    @property
    def qualified_name(self) -> str:
        """Implementation class name qualified by the collection namespace."""
        namespace = self.namespace.rstrip(".") or DEFAULT_NAMESPACE
        return f"{namespace}.{self.class_name}"

    @property
    def basename(self) -> str:
        return os.path.basename(self.locator)


def parse_descriptor(
    locator: str,
    namespace: str = DEFAULT_NAMESPACE,
    version_prefix: str = "",
) -> MigrationDescriptor | None:
    """Build a descriptor for a locator, or None if it has no version.

    Args:
        locator: Path or opaque locator of the migration unit.
        namespace: Namespace used to qualify the implementation class.
        version_prefix: Prefix prepended to the version in the store.

    Returns:
        MigrationDescriptor, or None when the base name lacks a leading
        digit run.
    """
    version = extract_version(locator)
    if version is None:
        return None
    return MigrationDescriptor(
        locator=locator,
        version=version,
        name_part=migration_name_part(locator),
        namespace=namespace,
        version_prefix=version_prefix,
    )
