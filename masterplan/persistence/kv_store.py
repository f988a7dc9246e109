"""Key/value persistence layer for master-plan state blobs."""

import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import structlog

from ..errors import PersistenceError, StorageQuotaError

logger = structlog.get_logger(__name__)


class KeyValueStore(ABC):
    """
    Synchronous string key/value store.

    Implementations never raise on ordinary storage faults: reads return
    None and writes return False after logging the fault.
    """

    def __init__(self, max_value_bytes: Optional[int] = None):
        self.max_value_bytes = max_value_bytes
        self.logger = logger

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if absent or unreadable."""

    @abstractmethod
    def set_many(self, items: dict[str, str]) -> bool:
        """Write all items in one pass. Returns False if nothing was written."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a key. Missing keys are not an error."""

    def set(self, key: str, value: str) -> bool:
        """Write a single value."""
        return self.set_many({key: value})

    def close(self) -> None:
        """Release any held resources."""

    def _check_quota(self, items: dict[str, str]) -> None:
        """Raise StorageQuotaError if any value exceeds the per-value quota."""
        if self.max_value_bytes is None:
            return

        for key, value in items.items():
            size = len(value.encode("utf-8"))
            if size > self.max_value_bytes:
                raise StorageQuotaError(
                    f"Value for {key} exceeds storage quota",
                    key=key,
                    size_bytes=size,
                    max_bytes=self.max_value_bytes
                )


class MemoryKeyValueStore(KeyValueStore):
    """In-process key/value store; contents do not survive the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None,
                 max_value_bytes: Optional[int] = None):
        super().__init__(max_value_bytes)
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_many(self, items: dict[str, str]) -> bool:
        try:
            self._check_quota(items)
        except StorageQuotaError as e:
            self.logger.warning(
                "Storage quota exceeded, state not saved",
                key=e.key,
                size_bytes=e.size_bytes,
                max_bytes=e.max_bytes
            )
            return False

        self._data.update(items)
        return True

    def delete(self, key: str) -> bool:
        self._data.pop(key, None)
        return True

    def snapshot(self) -> dict[str, str]:
        """Copy of everything currently stored."""
        return dict(self._data)


class SqliteKeyValueStore(KeyValueStore):
    """SQLite-based key/value persistence layer."""

    def __init__(self, db_path: str = "masterplan.db",
                 max_value_bytes: Optional[int] = None):
        super().__init__(max_value_bytes)
        self.db_path = Path(db_path)
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        try:
            with self._get_connection() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                """)
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to initialize key/value store: {e}",
                operation="init",
                target=str(self.db_path)
            ) from e

    @contextmanager
    def _get_connection(self):
        """Get database connection with proper error handling."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", db_path=str(self.db_path), error=str(e))
            raise
        finally:
            if conn:
                conn.close()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            try:
                with self._get_connection() as conn:
                    row = conn.execute(
                        "SELECT value FROM kv_store WHERE key = ?", (key,)
                    ).fetchone()
                    return row[0] if row else None

            except sqlite3.Error as e:
                self.logger.error("Failed to read key", key=key, error=str(e))
                return None

    def set_many(self, items: dict[str, str]) -> bool:
        with self._lock:
            try:
                self._check_quota(items)

                with self._get_connection() as conn:
                    now = datetime.now(timezone.utc).isoformat()
                    conn.executemany("""
                        INSERT OR REPLACE INTO kv_store (key, value, updated_at)
                        VALUES (?, ?, ?)
                    """, [(key, value, now) for key, value in items.items()])
                    conn.commit()
                    return True

            except StorageQuotaError as e:
                self.logger.warning(
                    "Storage quota exceeded, state not saved",
                    key=e.key,
                    size_bytes=e.size_bytes,
                    max_bytes=e.max_bytes
                )
                return False
            except sqlite3.Error as e:
                self.logger.error(
                    "Failed to write keys",
                    keys=sorted(items),
                    error=str(e)
                )
                return False

    def delete(self, key: str) -> bool:
        with self._lock:
            try:
                with self._get_connection() as conn:
                    conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                    conn.commit()
                    return True

            except sqlite3.Error as e:
                self.logger.error("Failed to delete key", key=key, error=str(e))
                return False

    def keys(self) -> list[str]:
        """List stored keys."""
        with self._lock:
            try:
                with self._get_connection() as conn:
                    rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
                    return [row[0] for row in rows]

            except sqlite3.Error as e:
                self.logger.error("Failed to list keys", error=str(e))
                return []


def open_store(db_path: Optional[str], max_value_bytes: Optional[int] = None) -> KeyValueStore:
    """
    Open the durable store, falling back to memory if it cannot be opened.

    A None path selects the in-memory store directly.
    """
    if db_path is None:
        return MemoryKeyValueStore(max_value_bytes=max_value_bytes)

    try:
        return SqliteKeyValueStore(db_path, max_value_bytes=max_value_bytes)
    except PersistenceError as e:
        logger.error(
            "Durable store unavailable, continuing in memory only",
            db_path=db_path,
            error=str(e)
        )
        return MemoryKeyValueStore(max_value_bytes=max_value_bytes)
