"""Functions for writing objects to an S3 bucket."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def upload_s3_object_from_file(
    bucket_name: str,
    object_key: str,
    file_path: str,
    s3_client: "S3Client",
    content_type: Optional[str] = None,
) -> str:
    """
    Stream a local file into an S3 bucket.

    An existing object under the same key is replaced.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: Key of the object in the bucket.
    :param file_path: Path of the local file to read.
    :param s3_client: The boto3 S3 client to write with.
    :param content_type: The MIME type of the file, e.g. "text/plain" for a text file.
    :return: The public URL of the stored object.
    """
    with open(file_path, "rb") as file_data:
        s3_client.put_object(
            Bucket=bucket_name,
            Key=object_key,
            Body=file_data,
            ContentType=content_type or DEFAULT_CONTENT_TYPE,
        )
    return object_url(bucket_name, object_key)


def object_url(bucket_name: str, object_key: str) -> str:
    """Virtual-hosted-style URL of an object; no request is made."""
    return f"https://{bucket_name}.s3.amazonaws.com/{object_key}"
