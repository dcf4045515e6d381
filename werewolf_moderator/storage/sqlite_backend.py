"""SQLite storage backend.

Keeps saved games in a dedicated SQLite file so they survive restarts
without any external service.
"""
import logging
import os
import sqlite3
import threading
import time
from typing import Optional

from werewolf_moderator.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class SqliteBackend:
    """Single-table key/value store.

    One shared connection guarded by a lock; the schema is created on
    first use.
    """

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._initialized = False
        self._lock = threading.Lock()
        self._conn: Optional[sqlite3.Connection] = None

    def _get_conn(self) -> sqlite3.Connection:
        """Get the shared SQLite connection, initializing schema if needed.

        Must be called while holding self._lock.
        """
        if self._conn is None:
            directory = os.path.dirname(self._db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        if not self._initialized:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS game_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
            """)
            self._conn.commit()
            self._initialized = True
        return self._conn

    def get(self, key: str) -> Optional[str]:
        try:
            with self._lock:
                row = self._get_conn().execute(
                    "SELECT value FROM game_store WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"SQLite GET failed for {key}: {e}")
            raise StorageError(f"Failed to read {key}", operation="get") from e
        return row[0] if row else None

    def put(self, key: str, value: str) -> None:
        try:
            with self._lock:
                conn = self._get_conn()
                conn.execute(
                    """INSERT OR REPLACE INTO game_store (key, value, updated_at)
                       VALUES (?, ?, ?)""",
                    (key, value, time.time())
                )
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"SQLite PUT failed for {key}: {e}")
            raise StorageError(f"Failed to write {key}", operation="put") from e

    def delete(self, key: str) -> bool:
        try:
            with self._lock:
                conn = self._get_conn()
                cursor = conn.execute("DELETE FROM game_store WHERE key = ?", (key,))
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"SQLite DELETE failed for {key}: {e}")
            raise StorageError(f"Failed to delete {key}", operation="delete") from e

    def exists(self, key: str) -> bool:
        return self.get(key) is not None

    def all_keys(self) -> list[str]:
        try:
            with self._lock:
                rows = self._get_conn().execute("SELECT key FROM game_store").fetchall()
        except sqlite3.Error as e:
            logger.error(f"SQLite KEYS failed: {e}")
            raise StorageError("Failed to list keys", operation="all_keys") from e
        return [row[0] for row in rows]

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                self._initialized = False
