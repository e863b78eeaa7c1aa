"""Persistence backends for the tracking document.

A backend stores the document as top-level fields (``tracked_products``,
``usage``, ...) each holding JSON-ready data. ``read`` fills in whatever is
missing from the caller's defaults; ``write`` replaces only the supplied
fields.
"""

from __future__ import annotations

import copy
import json
import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any, Protocol

from ..common.config import Config

logger = logging.getLogger(__name__)

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class StorageError(RuntimeError):
    """Underlying persistence call failed; nothing from the call was committed."""


class DocumentBackend(Protocol):
    def read(self, defaults: dict[str, Any]) -> dict[str, Any]: ...

    def write(self, partial: dict[str, Any]) -> None: ...


def get_connection(config: Config | None = None) -> sqlite3.Connection:
    """Get a SQLite connection with row factory enabled."""
    config = config or Config()
    db_path = config.database_abs_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def init_db(config: Config | None = None) -> None:
    """Initialize database schema (idempotent)."""
    config = config or Config()
    conn = get_connection(config)
    try:
        conn.executescript(_SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized at %s", config.database_abs_path)
    finally:
        conn.close()


class SQLiteBackend:
    """Document backend on a single key/value SQLite table.

    Usage:
        backend = SQLiteBackend(Config())
        doc = backend.read({"trends": []})
        backend.write({"trends": [...]})
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        try:
            init_db(self.config)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot initialize database: {exc}") from exc

    def read(self, defaults: dict[str, Any]) -> dict[str, Any]:
        result = copy.deepcopy(defaults)
        try:
            conn = get_connection(self.config)
            try:
                rows = conn.execute("SELECT key, value FROM documents").fetchall()
            finally:
                conn.close()
            for row in rows:
                result[row["key"]] = json.loads(row["value"])
        except (sqlite3.Error, json.JSONDecodeError) as exc:
            raise StorageError(f"Failed to read document: {exc}") from exc
        return result

    def write(self, partial: dict[str, Any]) -> None:
        if not partial:
            return
        now = datetime.now(timezone.utc).isoformat()
        try:
            conn = get_connection(self.config)
            try:
                with conn:
                    conn.executemany(
                        """
                        INSERT INTO documents (key, value, updated_at)
                        VALUES (?, ?, ?)
                        ON CONFLICT(key) DO UPDATE SET
                            value = excluded.value,
                            updated_at = excluded.updated_at
                        """,
                        [
                            (key, json.dumps(value, ensure_ascii=False), now)
                            for key, value in partial.items()
                        ],
                    )
            finally:
                conn.close()
        except (sqlite3.Error, TypeError, ValueError) as exc:
            raise StorageError(f"Failed to write {sorted(partial)}: {exc}") from exc
        logger.debug("Wrote document fields: %s", ", ".join(sorted(partial)))


class MemoryBackend:
    """In-process backend. Reads and writes deep-copy, so no state is aliased."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial or {})
        self.writes: int = 0

    def read(self, defaults: dict[str, Any]) -> dict[str, Any]:
        result = copy.deepcopy(defaults)
        result.update(copy.deepcopy(self._data))
        return result

    def write(self, partial: dict[str, Any]) -> None:
        self._data.update(copy.deepcopy(partial))
        self.writes += 1

    @property
    def data(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)
