"""Migration engine exceptions.

Every error raised while discovering, resolving or loading migrations
derives from MigrationError. Errors raised by a migration's own up() or
down() are never wrapped and propagate unchanged.
"""

from __future__ import annotations

from pathlib import Path


class MigrationError(Exception):
    """Base exception for migration engine errors."""


class InvalidSourceError(MigrationError):
    """Migration source directory is missing or unreadable."""

    def __init__(self, path: Path | str) -> None:
        self.path = str(path)
        super().__init__(f"Given path is not a readable directory: {self.path}")


class InvalidDescriptorError(MigrationError):
    """Migration locator does not carry a valid migration filename."""

    def __init__(self, locator: str) -> None:
        self.locator = locator
        super().__init__(
            f'The file "{locator}" does not have a valid migration filename'
        )


class DuplicateVersionError(MigrationError):
    """Two migrations share the same version number."""

    def __init__(self, version: str, locator: str, existing: str) -> None:
        self.version = version
        self.locator = locator
        self.existing = existing
        super().__init__(
            f'Duplicate migration, "{locator}" has the same version '
            f'({version}) as "{existing}"'
        )


class DuplicateImplementationError(MigrationError):
    """Two migrations resolve to the same implementation class name."""

    def __init__(self, qualified_name: str, locator: str, existing: str) -> None:
        self.qualified_name = qualified_name
        self.locator = locator
        self.existing = existing
        super().__init__(
            f'Migration "{locator}" has the same name ({qualified_name}) '
            f'as "{existing}"'
        )


class ImplementationNotFoundError(MigrationError):
    """No migration class is registered under the expected name."""

    def __init__(self, qualified_name: str, locator: str, reason: str = "") -> None:
        self.qualified_name = qualified_name
        self.locator = locator
        self.reason = reason
        message = f'Could not find class "{qualified_name}" in file "{locator}"'
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidImplementationError(MigrationError):
    """Resolved class does not implement the Migration interface."""

    def __init__(self, qualified_name: str, locator: str | None = None) -> None:
        self.qualified_name = qualified_name
        self.locator = locator
        where = f' in file "{locator}"' if locator else ""
        super().__init__(
            f'The class "{qualified_name}"{where} must extend pymig.Migration'
        )


class MissingAdapterError(MigrationError):
    """No version store adapter has been configured."""

    def __init__(self) -> None:
        super().__init__("No version store adapter is configured")


class InvalidVersionError(MigrationError):
    """Target version is missing, negative or unknown."""

    def __init__(self, version: object, reason: str = "expected >= 0") -> None:
        self.version = version
        self.reason = reason
        super().__init__(f"Invalid version given ({version!r}), {reason}")
