import pytest
from fastapi.testclient import TestClient

from upload_api.handler import UploadHandler
from upload_api.main import create_app
from upload_api.settings import Settings
from tests.consts import TEST_BUCKET_NAME
from tests.fixtures.aws_fixtures import aws_credentials, mocked_aws  # noqa: F401
from tests.fixtures.db_client import database_factory, db_path, db_tracker  # noqa: F401


@pytest.fixture
def spool_dir(tmp_path):
    path = tmp_path / "spool"
    path.mkdir()
    return path


@pytest.fixture
def upload_handler(mocked_aws, database_factory, spool_dir) -> UploadHandler:
    return UploadHandler(
        bucket_name=TEST_BUCKET_NAME,
        s3_client=mocked_aws,
        database_factory=database_factory,
        upload_dir=str(spool_dir),
    )


@pytest.fixture
def test_settings(db_path) -> Settings:
    return Settings(_env_file=None, deployment_mode="local-dev", sqlite_path=db_path)


@pytest.fixture
def client(test_settings, upload_handler):
    app = create_app(settings=test_settings, upload_handler=upload_handler)
    with TestClient(app) as client:
        yield client
