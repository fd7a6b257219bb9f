from unittest import mock

import psycopg2
import pytest

from upload_api.database.postgres import INSERT_UPLOAD_SQL, PostgresUploadsDatabase
from upload_api.settings import DatabaseSettings


@pytest.fixture
def pg_settings():
    return DatabaseSettings(host="db.internal", user="uploader", password="s3cret", database="files", port=6543)


@pytest.fixture
def fake_connection():
    conn = mock.MagicMock(name="connection")
    cursor = conn.cursor.return_value.__enter__.return_value
    cursor.fetchone.return_value = {"id": 7, "filename": "a.txt", "filepath": "https://x/a.txt"}
    return conn


def test_connect_uses_settings(pg_settings, fake_connection):
    with mock.patch("psycopg2.connect", return_value=fake_connection) as connect:
        PostgresUploadsDatabase(pg_settings).connect()

    connect.assert_called_once_with(
        host="db.internal", user="uploader", password="s3cret", dbname="files", port=6543
    )


def test_insert_upload_is_parameterized(pg_settings, fake_connection):
    database = PostgresUploadsDatabase(pg_settings)
    with mock.patch("psycopg2.connect", return_value=fake_connection):
        database.connect()

    row = database.insert_upload("a.txt", "https://x/a.txt")

    cursor = fake_connection.cursor.return_value.__enter__.return_value
    cursor.execute.assert_called_once_with(INSERT_UPLOAD_SQL, ("a.txt", "https://x/a.txt"))
    assert row == {"id": 7, "filename": "a.txt", "filepath": "https://x/a.txt"}


def test_close_swallows_driver_errors(pg_settings, fake_connection):
    fake_connection.close.side_effect = psycopg2.InterfaceError("already closed")
    database = PostgresUploadsDatabase(pg_settings)
    with mock.patch("psycopg2.connect", return_value=fake_connection):
        database.connect()

    database.close()
    database.close()

    fake_connection.close.assert_called_once()


def test_close_after_failed_connect(pg_settings):
    database = PostgresUploadsDatabase(pg_settings)
    with mock.patch("psycopg2.connect", side_effect=psycopg2.OperationalError("refused")):
        with pytest.raises(psycopg2.OperationalError):
            database.connect()

    database.close()
