"""Key-value repository over the ``kv_store`` table.

Values are JSON documents; the repository encodes on write and decodes on
read so callers deal in plain Python objects.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Any


class KeyValueRepository:
    """Data access layer for the host's persistent key-value storage.

    Wraps an open sqlite3.Connection. The connection is owned by the caller
    and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with migrations applied
                (see tabrelay.db.migrations.run_migrations).
        """
        self._conn = conn

    def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value stored under *key*, or *default*."""
        row = self._conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return default
        return json.loads(row["value"])

    def set(self, key: str, value: Any) -> None:
        """Insert or replace the value for *key*."""
        self._conn.execute(
            """
            INSERT INTO kv_store (key, value, updated_at)
            VALUES (?, ?, datetime('now'))
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (key, json.dumps(value, ensure_ascii=False)),
        )
        self._conn.commit()

    def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        self._conn.commit()

    def keys(self) -> list[str]:
        """Return all stored keys in alphabetical order."""
        rows = self._conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [r["key"] for r in rows]
