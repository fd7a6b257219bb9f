"""Error taxonomy for the upload flow and the FastAPI error handlers."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class UploadError(Exception):
    """
    Base class for failures that end an upload with a known response.

    Subclasses fix the HTTP status and the client-facing message. Anything
    more specific belongs in the log, not in ``message``.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = INTERNAL_ERROR_MESSAGE


class NoFileUploadedError(UploadError):
    """The multipart form parsed but held no ``file`` part."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "No file uploaded"


class UploadParseError(UploadError):
    """The request body could not be decoded as multipart/form-data."""

    message = "File upload failed"


class StorageError(UploadError):
    """Writing the object to S3 failed."""

    message = "File upload to S3 failed"


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates during the request."""
    try:
        return await call_next(request)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR_MESSAGE},
        )
