"""Plain text version store: one applied version per line."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pymig.migration.base import Migration

logger = logging.getLogger(__name__)


class FileAdapter:
    """Stores applied versions in a text file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def fetch_all(self) -> list[str]:
        if not self._path.exists():
            return []
        lines = self._path.read_text(encoding="utf-8").splitlines()
        return sorted(line.strip() for line in lines if line.strip())

    def has_schema(self) -> bool:
        return self._path.is_file()

    def create_schema(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        if not self._path.exists():
            self._path.touch()
            logger.info("Created migration log %s", self._path)

    def up(self, migration: Migration) -> None:
        versions = self.fetch_all()
        if migration.version not in versions:
            versions.append(migration.version)
        self._save(versions)

    def down(self, migration: Migration) -> None:
        versions = [v for v in self.fetch_all() if v != migration.version]
        self._save(versions)

    def close(self) -> None:
        """Nothing is held open between calls."""

    def _save(self, versions: list[str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        content = "".join(f"{version}\n" for version in sorted(versions))
        self._path.write_text(content, encoding="utf-8")
