"""AWS client construction driven by :class:`Settings`."""
import logging
from typing import TYPE_CHECKING, Any, Dict

import boto3

from upload_api.settings import Settings

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)


def get_s3_client(settings: Settings) -> "S3Client":
    """
    Create an S3 client for the configured deployment mode.

    Explicit credentials and a custom endpoint are only passed when set, so in
    aws-prod boto3 falls back to the Lambda execution role.
    """
    client_kwargs: Dict[str, Any] = {"region_name": settings.aws_region}

    if settings.aws_access_key_id:
        client_kwargs["aws_access_key_id"] = settings.aws_access_key_id
    if settings.aws_secret_access_key:
        client_kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
    if settings.aws_endpoint_url:
        client_kwargs["endpoint_url"] = settings.aws_endpoint_url

    logger.info(
        "Creating S3 client (mode=%s, region=%s, endpoint=%s)",
        settings.deployment_mode,
        settings.aws_region,
        settings.aws_endpoint_url or "default",
    )
    return boto3.client("s3", **client_kwargs)
