"""
Relational storage for upload records.

Two interchangeable backends implement :class:`UploadsDatabase`: SQLite for
local-dev and PostgreSQL for the AWS modes. ``get_database_factory`` picks one
from the settings and returns a zero-argument callable producing a fresh,
unconnected session per request.
"""
from functools import partial
from typing import Callable

from upload_api.settings import Settings

from .base import UPLOADS_TABLE, UploadsDatabase
from .local import SqliteUploadsDatabase, init_db

DatabaseFactory = Callable[[], UploadsDatabase]


def get_database_factory(settings: Settings) -> DatabaseFactory:
    """Return a factory for per-request database sessions."""
    if settings.database_backend == "postgres":
        # psycopg2 is only needed when the postgres backend is in use
        from .postgres import PostgresUploadsDatabase
        return partial(PostgresUploadsDatabase, settings.postgres)
    return partial(SqliteUploadsDatabase, settings.sqlite_path)


__all__ = [
    'UPLOADS_TABLE', 'UploadsDatabase', 'DatabaseFactory',
    'SqliteUploadsDatabase', 'init_db', 'get_database_factory',
]
