"""SQLite backend for local development."""
import logging
import sqlite3
from typing import Any, Dict, Optional

from .base import UPLOADS_TABLE, UploadsDatabase

logger = logging.getLogger(__name__)


def init_db(db_path: str = "uploads.db") -> None:
    """Initialize database with the uploads table."""
    conn = sqlite3.connect(db_path)
    try:
        cursor = conn.cursor()
        cursor.execute(f'''
            CREATE TABLE IF NOT EXISTS {UPLOADS_TABLE} (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                filename VARCHAR(255) NOT NULL,
                filepath VARCHAR(1024) NOT NULL,
                uploaded_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')
        conn.commit()
    finally:
        conn.close()


class SqliteUploadsDatabase(UploadsDatabase):
    """Upload records in a local SQLite file."""

    def __init__(self, db_path: str = "uploads.db"):
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None

    def connect(self) -> None:
        # handler runs each call on a threadpool worker, not necessarily the same one
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row

    def insert_upload(self, filename: str, filepath: str) -> Dict[str, Any]:
        if self._conn is None:
            raise RuntimeError("insert_upload called before connect")
        # RETURNING needs SQLite 3.35+
        cursor = self._conn.execute(
            f"INSERT INTO {UPLOADS_TABLE} (filename, filepath) VALUES (?, ?)",
            (filename, filepath),
        )
        row_id = cursor.lastrowid
        cursor.close()
        row = self._conn.execute(
            f"SELECT * FROM {UPLOADS_TABLE} WHERE id = ?", (row_id,)
        ).fetchone()
        self._conn.commit()
        return dict(row)

    def close(self) -> None:
        if self._conn is None:
            return
        try:
            self._conn.close()
        except sqlite3.Error as e:
            logger.warning(f"Error closing SQLite connection: {e}")
        finally:
            self._conn = None

    def init_schema(self) -> None:
        init_db(self.db_path)
