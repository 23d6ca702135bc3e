"""Registry of migration implementation classes.

Migration classes are looked up by an explicit qualified name
(``<namespace>.<ClassName>``) instead of by runtime name lookup. The registry
is filled in two ways:

1. Classes in importable packages register themselves with the
   ``register_migration`` decorator.
2. Migration files found by a directory scan are imported on demand by
   ``scan_file`` and every Migration subclass they define is registered.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import re
import sys
from collections.abc import Callable
from pathlib import Path
from types import ModuleType

from pymig.exceptions import (
    DuplicateImplementationError,
    ImplementationNotFoundError,
    InvalidImplementationError,
)
from pymig.migration.base import Migration
from pymig.migration.descriptor import DEFAULT_NAMESPACE

logger = logging.getLogger(__name__)

_MODULE_NAME_RE = re.compile(r"[^0-9A-Za-z_]")


def qualify(namespace: str, class_name: str) -> str:
    """Build the registry key for a class in a namespace."""
    namespace = namespace.rstrip(".") or DEFAULT_NAMESPACE
    return f"{namespace}.{class_name}"


def _module_name_for(path: Path, namespace: str) -> str:
    raw = f"pymig_migrations_{namespace}_{path.stem}"
    return _MODULE_NAME_RE.sub("_", raw)


class MigrationTypeRegistry:
    """Maps qualified migration names to Migration subclasses."""

    def __init__(self) -> None:
        self._types: dict[str, type[Migration]] = {}
        self._modules: dict[Path, ModuleType] = {}

    def register(
        self,
        cls: type,
        namespace: str = DEFAULT_NAMESPACE,
        name: str | None = None,
    ) -> str:
        """Register a migration class.

        Args:
            cls: Class implementing Migration.
            namespace: Namespace qualifying the class name.
            name: Class name to register under. Defaults to cls.__name__.

        Returns:
            The qualified name the class is registered under.

        Raises:
            InvalidImplementationError: If cls is not a concrete Migration.
            DuplicateImplementationError: If another class already holds
                the name.
        """
        qualified_name = qualify(namespace, name or cls.__name__)

        if (
            not isinstance(cls, type)
            or not issubclass(cls, Migration)
            or inspect.isabstract(cls)
        ):
            raise InvalidImplementationError(qualified_name)

        existing = self._types.get(qualified_name)
        if existing is not None and existing is not cls:
            raise DuplicateImplementationError(
                qualified_name,
                locator=f"{cls.__module__}.{cls.__qualname__}",
                existing=f"{existing.__module__}.{existing.__qualname__}",
            )

        self._types[qualified_name] = cls
        logger.debug("Registered migration class: %s", qualified_name)
        return qualified_name

    def get(self, qualified_name: str) -> type[Migration] | None:
        return self._types.get(qualified_name)

    def names(self) -> list[str]:
        return sorted(self._types)

    def copy(self) -> MigrationTypeRegistry:
        """Return a registry holding the same classes but no imported files."""
        clone = MigrationTypeRegistry()
        clone._types.update(self._types)
        return clone

    def scan_file(
        self, path: Path | str, namespace: str = DEFAULT_NAMESPACE
    ) -> ModuleType:
        """Import a migration file and register the classes it defines.

        Only Migration subclasses defined in the file itself are registered;
        imported base classes are ignored. A file is executed at most once
        per registry.

        Args:
            path: Path to the migration .py file.
            namespace: Namespace to register the classes under.

        Returns:
            The imported module.

        Raises:
            ImplementationNotFoundError: If the file cannot be imported.
        """
        file_path = Path(path).resolve()
        module = self._modules.get(file_path)
        if module is None:
            module = self._import_file(file_path, namespace)
            self._modules[file_path] = module

        for _, obj in inspect.getmembers(module, inspect.isclass):
            if obj.__module__ != module.__name__:
                continue
            if issubclass(obj, Migration) and not inspect.isabstract(obj):
                self.register(obj, namespace)

        return module

    def _import_file(self, file_path: Path, namespace: str) -> ModuleType:
        module_name = _module_name_for(file_path, namespace)
        try:
            spec = importlib.util.spec_from_file_location(module_name, file_path)
            if spec is None or spec.loader is None:
                raise ImplementationNotFoundError(
                    module_name,
                    str(file_path),
                    "could not create module spec",
                )
            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            spec.loader.exec_module(module)
        except ImplementationNotFoundError:
            raise
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise ImplementationNotFoundError(
                module_name, str(file_path), f"import failed: {e}"
            ) from e

        logger.debug("Imported migration file %s as %s", file_path, module_name)
        return module

    def __contains__(self, qualified_name: object) -> bool:
        return qualified_name in self._types

    def __len__(self) -> int:
        return len(self._types)


_default_registry = MigrationTypeRegistry()


def get_default_registry() -> MigrationTypeRegistry:
    """Return the process-wide registry used by register_migration."""
    return _default_registry


def register_migration(
    namespace: str = DEFAULT_NAMESPACE,
    registry: MigrationTypeRegistry | None = None,
) -> Callable[[type[Migration]], type[Migration]]:
    """Class decorator registering a migration class.

    Example:
        @register_migration(namespace="billing")
        class CreateInvoices(Migration):
            ...
    """

    def decorator(cls: type[Migration]) -> type[Migration]:
        target = registry if registry is not None else _default_registry
        target.register(cls, namespace)
        return cls

    return decorator
