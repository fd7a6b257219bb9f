import pytest
from pydantic import ValidationError

from upload_api.database import SqliteUploadsDatabase, get_database_factory
from upload_api.database.postgres import PostgresUploadsDatabase
from upload_api.settings import BUCKET_NAME, DatabaseSettings, Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ["PGHOST", "PGUSER", "PGPASSWORD", "PGDATABASE", "PGPORT",
                 "DEPLOYMENT_MODE", "EXEC_MODE", "DATABASE_BACKEND"]:
        monkeypatch.delenv(name, raising=False)


def test_database_defaults(monkeypatch):
    monkeypatch.setenv("USER", "someone-logged-in")

    db = DatabaseSettings(_env_file=None)

    assert db.host == "localhost"
    assert db.user == "postgres"
    assert db.password == "password"
    assert db.database == "mydb"
    assert db.port == 5432


def test_database_from_environment(monkeypatch):
    monkeypatch.setenv("PGHOST", "db.example.com")
    monkeypatch.setenv("PGUSER", "uploader")
    monkeypatch.setenv("PGPASSWORD", "hunter2")
    monkeypatch.setenv("PGDATABASE", "files")
    monkeypatch.setenv("PGPORT", "6543")

    settings = Settings(_env_file=None)

    assert settings.postgres.connect_kwargs() == {
        "host": "db.example.com",
        "user": "uploader",
        "password": "hunter2",
        "dbname": "files",
        "port": 6543,
    }


def test_bucket_is_fixed(monkeypatch):
    monkeypatch.setenv("BUCKET_NAME", "something-else")

    assert Settings(_env_file=None).bucket_name == BUCKET_NAME == "uploads-s3-bucket"


def test_local_dev_defaults():
    settings = Settings(_env_file=None)

    assert settings.deployment_mode == "local-dev"
    assert settings.database_backend == "sqlite"
    assert settings.server_port == 3000


def test_aws_mock_defaults(monkeypatch):
    monkeypatch.delenv("AWS_ACCESS_KEY_ID")
    monkeypatch.delenv("AWS_SECRET_ACCESS_KEY")

    settings = Settings(_env_file=None, deployment_mode="aws-mock")

    assert settings.database_backend == "postgres"
    assert settings.aws_endpoint_url == "http://localhost:5000"
    assert settings.aws_access_key_id == "mock"


def test_aws_prod_keeps_role_credentials(monkeypatch):
    monkeypatch.delenv("AWS_ACCESS_KEY_ID")
    monkeypatch.delenv("AWS_SECRET_ACCESS_KEY")

    settings = Settings(_env_file=None, deployment_mode="aws-prod")

    assert settings.aws_endpoint_url is None
    assert settings.aws_access_key_id is None


def test_deployment_mode_from_environment(monkeypatch):
    monkeypatch.setenv("DEPLOYMENT_MODE", "cloud")

    assert Settings(_env_file=None).deployment_mode == "aws-prod"


@pytest.mark.parametrize("kwargs", [{"deployment_mode": "staging"}, {"database_backend": "mysql"}])
def test_invalid_values(kwargs):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **kwargs)


def test_describe_masks_password(monkeypatch):
    monkeypatch.setenv("PGPASSWORD", "hunter2")

    described = Settings(_env_file=None).describe()

    assert described["pg_password"] == "****"
    assert "hunter2" not in str(described)


def test_database_factory_selection(tmp_path):
    sqlite_settings = Settings(_env_file=None, sqlite_path=str(tmp_path / "x.db"))
    postgres_settings = Settings(_env_file=None, database_backend="postgres")

    sqlite_db = get_database_factory(sqlite_settings)()
    postgres_db = get_database_factory(postgres_settings)()

    assert isinstance(sqlite_db, SqliteUploadsDatabase)
    assert sqlite_db.db_path == str(tmp_path / "x.db")
    assert isinstance(postgres_db, PostgresUploadsDatabase)
    # a fresh, unconnected session per call
    assert get_database_factory(sqlite_settings)() is not sqlite_db
