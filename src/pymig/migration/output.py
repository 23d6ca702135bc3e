"""Output sinks for migration progress messages."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import click


@runtime_checkable
class OutputSink(Protocol):
    """Anything that accepts progress lines."""

    def write(self, message: str) -> None: ...


class ClickOutput:
    """Write lines to the terminal through click."""

    def __init__(self, err: bool = False) -> None:
        self._err = err

    def write(self, message: str) -> None:
        click.echo(message, err=self._err)


class BufferedOutput:
    """Collect lines in memory.

    Useful when driving the API from another program:

        output = BufferedOutput()
        app = MigrationApplication(adapter, output, collections)
        app.up()
        print(output.fetch())
    """

    def __init__(self) -> None:
        self._lines: list[str] = []

    def write(self, message: str) -> None:
        self._lines.append(message)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def fetch(self) -> str:
        """Return buffered output and clear the buffer."""
        text = "\n".join(self._lines)
        self._lines.clear()
        return text


class NullOutput:
    """Discard everything."""

    def write(self, message: str) -> None:
        pass
