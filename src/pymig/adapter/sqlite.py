"""SQLite version store."""

from __future__ import annotations

import logging
import re
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pymig.migration.base import Migration

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "migrations"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def connect(db_path: Path, timeout: float = 30.0) -> sqlite3.Connection:
    """Open a database connection with the settings the adapter expects.

    Args:
        db_path: Path to the database file, or ``:memory:``.
        timeout: How long to wait for locks (seconds).

    Returns:
        An open sqlite3 Connection.
    """
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path), timeout=timeout)
    conn.execute("PRAGMA foreign_keys = ON")
    # Another process holding the write lock makes us wait rather than fail
    conn.execute("PRAGMA busy_timeout = 10000")
    conn.row_factory = sqlite3.Row
    return conn


class SqliteAdapter:
    """Stores applied versions in a SQLite table.

    Table layout::

        CREATE TABLE migrations (
            version TEXT PRIMARY KEY,
            applied_at TEXT NOT NULL
        )
    """

    def __init__(self, conn: sqlite3.Connection, table: str = DEFAULT_TABLE) -> None:
        if not _IDENTIFIER_RE.match(table):
            raise ValueError(f"Invalid table name: {table!r}")
        self._conn = conn
        self._table = table

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    @property
    def table(self) -> str:
        return self._table

    def fetch_all(self) -> list[str]:
        cursor = self._conn.execute(
            f"SELECT version FROM {self._table} ORDER BY version"  # nosec B608
        )
        return [row[0] for row in cursor.fetchall()]

    def has_schema(self) -> bool:
        cursor = self._conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
            (self._table,),
        )
        return cursor.fetchone() is not None

    def create_schema(self) -> None:
        self._conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self._table} (
                version TEXT PRIMARY KEY,
                applied_at TEXT NOT NULL
            )
            """
        )
        self._conn.commit()
        logger.info("Created migration table %s", self._table)

    def up(self, migration: Migration) -> None:
        applied_at = datetime.now(timezone.utc).isoformat()
        self._conn.execute(
            f"INSERT OR REPLACE INTO {self._table} (version, applied_at) "  # nosec B608
            "VALUES (?, ?)",
            (migration.version, applied_at),
        )
        self._conn.commit()

    def down(self, migration: Migration) -> None:
        self._conn.execute(
            f"DELETE FROM {self._table} WHERE version = ?",  # nosec B608
            (migration.version,),
        )
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()
