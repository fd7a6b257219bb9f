from upload_api.s3.write_objects import object_url, upload_s3_object_from_file
from tests.consts import TEST_BUCKET_NAME


def test_object_url():
    assert object_url("uploads-s3-bucket", "photo.png") == "https://uploads-s3-bucket.s3.amazonaws.com/photo.png"


def test_upload_s3_object_from_file(mocked_aws, tmp_path):
    local_file = tmp_path / "report.pdf"
    local_file.write_bytes(b"%PDF-1.4")

    url = upload_s3_object_from_file(
        bucket_name=TEST_BUCKET_NAME,
        object_key="report.pdf",
        file_path=str(local_file),
        s3_client=mocked_aws,
    )

    assert url == f"https://{TEST_BUCKET_NAME}.s3.amazonaws.com/report.pdf"
    obj = mocked_aws.get_object(Bucket=TEST_BUCKET_NAME, Key="report.pdf")
    assert obj["Body"].read() == b"%PDF-1.4"
    assert obj["ContentType"] == "application/octet-stream"
