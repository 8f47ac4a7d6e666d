"""Key-value storage for the keep-alive engine.

The engine only needs get/put of opaque string blobs. Three keys are used:
``urls`` (target list), ``settings`` (retry policy) and ``logs`` (history).
No transactions or conditional writes are assumed.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from pathlib import Path
from typing import Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

DB_PATH = Path(__file__).parent.parent.parent / "data" / "keepalive.db"

URLS_KEY = "urls"
SETTINGS_KEY = "settings"
LOGS_KEY = "logs"

T = TypeVar("T")


class StoreError(Exception):
    """Raised when the underlying store cannot be read or written."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str) -> None: ...


class SQLiteKVStore:
    """SQLite-backed key-value store. One row per key, value is an opaque string."""

    def __init__(self, db_path: Path | str | None = None) -> None:
        self._db_path = Path(db_path) if db_path else DB_PATH
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: sqlite3.Connection | None = None
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
            self._conn.execute("PRAGMA journal_mode=WAL")
        return self._conn

    def _init_db(self) -> None:
        try:
            conn = self._get_conn()
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key         TEXT PRIMARY KEY,
                    value       TEXT NOT NULL,
                    updated_at  REAL NOT NULL
                )
            """)
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Cannot initialise store at {self._db_path}: {e}") from e

    def get(self, key: str) -> str | None:
        try:
            row = self._get_conn().execute(
                "SELECT value FROM kv WHERE key = ?", (key,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Read of {key!r} failed: {e}") from e
        return row[0] if row else None

    def put(self, key: str, value: str) -> None:
        try:
            conn = self._get_conn()
            conn.execute(
                "INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "updated_at = excluded.updated_at",
                (key, value, time.time()),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Write of {key!r} failed: {e}") from e

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None


# ── Typed decode helpers ─────────────────────────────────────────────────────


def decode_or_default(adapter: TypeAdapter[T], raw: str | None, default: T) -> T:
    """Decode a JSON blob with ``adapter``; return ``default`` if absent or invalid."""
    if not raw:
        return default
    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        logger.warning("Discarding malformed stored value (%d validation errors)", e.error_count())
        return default


def get_typed(store: KeyValueStore, key: str, adapter: TypeAdapter[T], default: T) -> T:
    """Read ``key`` and decode it. Store errors propagate, parse errors do not."""
    return decode_or_default(adapter, store.get(key), default)
