"""Base class for migrations.

Every migration file defines one subclass of Migration named after the file:
``20230101_create_users.py`` defines ``class CreateUsers(Migration)``.

Example:
    class CreateUsers(Migration):
        description = "Create the users table"

        def up(self) -> None:
            self.context["conn"].execute(
                "CREATE TABLE users (id INTEGER PRIMARY KEY)"
            )

        def down(self) -> None:
            self.context["conn"].execute("DROP TABLE users")
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pymig.migration.output import NullOutput, OutputSink


class Migration(ABC):
    """Abstract base class for migrations.

    Subclasses implement up() and down(). Hooks run around them in this
    order: init(), pre_up(), up(), post_up() (and the down counterparts).

    Attributes:
        description: Optional human-readable summary shown by ``status`` and ``check``.
    """

    description: str = ""

    def __init__(self, version: str) -> None:
        self._version = str(version)
        self._output: OutputSink = NullOutput()
        self._context: Mapping[str, Any] = MappingProxyType({})

    @property
    def version(self) -> str:
        """Prefixed version string as recorded in the version store."""
        return self._version

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def output(self) -> OutputSink:
        return self._output

    def set_output(self, output: OutputSink) -> None:
        """Inject the output sink."""
        self._output = output

    @property
    def context(self) -> Mapping[str, Any]:
        """Resources handed to migrations by the application (connections etc.)."""
        return self._context

    def set_context(self, context: Mapping[str, Any]) -> None:
        self._context = MappingProxyType(dict(context))

    def write(self, message: str) -> None:
        """Write a line to the injected output sink."""
        self._output.write(message)

    def init(self) -> None:
        """Called before pre_up()/pre_down()."""

    def pre_up(self) -> None:
        pass

    @abstractmethod
    def up(self) -> None:
        """Apply the migration."""

    def post_up(self) -> None:
        pass

    def pre_down(self) -> None:
        pass

    @abstractmethod
    def down(self) -> None:
        """Revert the migration."""

    def post_down(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"<Migration {self.version} {self.name}>"
