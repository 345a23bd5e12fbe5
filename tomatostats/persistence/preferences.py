"""SQLite-backed key-value preference store.

Holds opaque blobs under string keys, the way a desktop app keeps its
user defaults.  The record log lives in a single entry of this store.
"""

import sqlite3
from typing import Optional


class PreferenceStore:
    """Read/write interface to a local ``preferences`` table.

    Values are stored as BLOBs; callers own the encoding.
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None

    # ------------------------------------------------------------------
    # Connection helpers
    # ------------------------------------------------------------------

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # ------------------------------------------------------------------
    # Schema initialisation
    # ------------------------------------------------------------------

    def init_db(self) -> None:
        """Create the preferences table if it doesn't already exist."""
        conn = self._get_conn()
        conn.execute(
            """\
            CREATE TABLE IF NOT EXISTS preferences (
                key TEXT PRIMARY KEY,
                value BLOB NOT NULL
            )
            """
        )
        conn.commit()

    # ------------------------------------------------------------------
    # Key-value operations
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[bytes]:
        """Return the blob stored under *key*, or ``None``."""
        conn = self._get_conn()
        row = conn.execute(
            "SELECT value FROM preferences WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        value = row[0]
        if isinstance(value, str):
            return value.encode("utf-8")
        return bytes(value)

    def set(self, key: str, value: bytes) -> None:
        """Insert or replace the blob under *key*."""
        conn = self._get_conn()
        conn.execute(
            "INSERT OR REPLACE INTO preferences (key, value) VALUES (?, ?)",
            (key, sqlite3.Binary(value)),
        )
        conn.commit()

    def remove(self, key: str) -> None:
        conn = self._get_conn()
        conn.execute("DELETE FROM preferences WHERE key = ?", (key,))
        conn.commit()
