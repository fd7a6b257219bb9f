from upload_api.settings import BUCKET_NAME

TEST_BUCKET_NAME = BUCKET_NAME
TEST_FILE_NAME = "example.jpg"
TEST_FILE_CONTENT = b"\xff\xd8\xff\xe0 not really a jpeg"
TEST_FILE_CONTENT_TYPE = "image/jpeg"
TEST_FILE_URL = f"https://{BUCKET_NAME}.s3.amazonaws.com/{TEST_FILE_NAME}"
