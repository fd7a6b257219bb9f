"""PostgreSQL backend used in the aws-mock and aws-prod deployment modes."""
import logging
from typing import Any, Dict, Optional

import psycopg2
from psycopg2.extras import RealDictCursor

from upload_api.settings import DatabaseSettings

from .base import UPLOADS_TABLE, UploadsDatabase

logger = logging.getLogger(__name__)

INSERT_UPLOAD_SQL = f"INSERT INTO {UPLOADS_TABLE} (filename, filepath) VALUES (%s, %s) RETURNING *"

CREATE_UPLOADS_SQL = f"""
    CREATE TABLE IF NOT EXISTS {UPLOADS_TABLE} (
        id SERIAL PRIMARY KEY,
        filename VARCHAR(255) NOT NULL,
        filepath VARCHAR(1024) NOT NULL,
        uploaded_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
"""


class PostgresUploadsDatabase(UploadsDatabase):
    """Upload records in PostgreSQL, one connection per instance."""

    def __init__(self, settings: DatabaseSettings):
        self.settings = settings
        self._conn: Optional["psycopg2.extensions.connection"] = None

    def connect(self) -> None:
        logger.debug(
            f"Connecting to PostgreSQL at {self.settings.host}:{self.settings.port}/{self.settings.database}"
        )
        self._conn = psycopg2.connect(**self.settings.connect_kwargs())

    def insert_upload(self, filename: str, filepath: str) -> Dict[str, Any]:
        if self._conn is None:
            raise RuntimeError("insert_upload called before connect")
        # the connection context manager commits on success and rolls back on error
        with self._conn:
            with self._conn.cursor(cursor_factory=RealDictCursor) as cursor:
                cursor.execute(INSERT_UPLOAD_SQL, (filename, filepath))
                row = cursor.fetchone()
        return dict(row)

    def close(self) -> None:
        if self._conn is None:
            return
        try:
            self._conn.close()
        except psycopg2.Error as e:
            logger.warning(f"Error closing PostgreSQL connection: {e}")
        finally:
            self._conn = None

    def init_schema(self) -> None:
        self.connect()
        try:
            with self._conn:
                with self._conn.cursor() as cursor:
                    cursor.execute(CREATE_UPLOADS_SQL)
        finally:
            self.close()
