"""
The upload request handler.

``UploadHandler.handle`` turns one :class:`UploadEvent` into exactly one
:class:`UploadResponse`. On the ``POST /upload`` route it runs, in order:

1. open a database session
2. parse the multipart body
3. stream the ``file`` part to S3 under its original filename
4. insert an ``uploads`` row pointing at the object's public URL

There is no retry and no compensation: if the insert fails after the S3 put,
the object stays where it is. The database session is closed and spooled temp
files are removed on every path.
"""
import logging
from typing import TYPE_CHECKING, Optional

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import status
from starlette.concurrency import run_in_threadpool

from upload_api.database import DatabaseFactory, UploadsDatabase
from upload_api.errors import (
    INTERNAL_ERROR_MESSAGE,
    NoFileUploadedError,
    StorageError,
    UploadError,
)
from upload_api.multipart import ParsedForm, parse_multipart
from upload_api.s3.write_objects import upload_s3_object_from_file
from upload_api.schemas import (
    UPLOAD_FILE_FIELD,
    UPLOAD_PATH,
    ErrorResponse,
    RouteNotFoundResponse,
    UploadEvent,
    UploadRecord,
    UploadResponse,
    UploadSuccessResponse,
)
from upload_api.utils.decorators import async_log_execution_time

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str) -> UploadResponse:
    return UploadResponse(
        status_code=status_code,
        body=ErrorResponse(error=message).model_dump_json(),
    )


class UploadHandler:
    """Orchestrates parse, store and persist for a single upload request."""

    def __init__(
        self,
        bucket_name: str,
        s3_client: "S3Client",
        database_factory: DatabaseFactory,
        upload_dir: Optional[str] = None,
    ):
        self.bucket_name = bucket_name
        self.s3_client = s3_client
        self.database_factory = database_factory
        self.upload_dir = upload_dir

    @async_log_execution_time
    async def handle(self, event: UploadEvent) -> UploadResponse:
        if event.method.upper() != "POST" or event.path != UPLOAD_PATH:
            logger.debug(f"No route for {event.method} {event.path}")
            return UploadResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                body=RouteNotFoundResponse().model_dump_json(),
            )

        database = self.database_factory()
        form: Optional[ParsedForm] = None
        try:
            await run_in_threadpool(database.connect)
            form = await parse_multipart(event.headers, event.body, upload_dir=self.upload_dir)
            record = await self._store_and_record(form, database)
            return UploadResponse(
                status_code=status.HTTP_200_OK,
                body=UploadSuccessResponse(upload=record).model_dump_json(),
            )
        except UploadError as e:
            return _error_response(e.status_code, e.message)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Upload failed with an unexpected error")
            return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
        finally:
            await run_in_threadpool(database.close)
            if form is not None:
                form.cleanup()

    async def _store_and_record(self, form: ParsedForm, database: UploadsDatabase) -> UploadRecord:
        upload = form.get_file(UPLOAD_FILE_FIELD)
        if upload is None:
            raise NoFileUploadedError()

        filename = upload.original_filename
        logger.info(f"Uploading '{filename}' ({upload.size} bytes) to bucket '{self.bucket_name}'")

        try:
            file_url = await run_in_threadpool(
                upload_s3_object_from_file,
                bucket_name=self.bucket_name,
                object_key=filename,
                file_path=upload.filepath,
                s3_client=self.s3_client,
                content_type=upload.content_type,
            )
        except (BotoCoreError, ClientError, OSError) as e:
            logger.error(f"S3 upload error: {e}")
            raise StorageError() from e

        row = await run_in_threadpool(database.insert_upload, filename, file_url)
        logger.info(f"Recorded upload '{filename}' at {file_url}")
        return UploadRecord(**row)
