from textwrap import dedent
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.routing import APIRoute

from upload_api.aws_clients import get_s3_client
from upload_api.database import get_database_factory
from upload_api.errors import handle_broad_exceptions
from upload_api.handler import UploadHandler
from upload_api.routers.health import router as health_router
from upload_api.routers.uploads import router as uploads_router
from upload_api.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_upload_handler(settings: Settings) -> UploadHandler:
    """Wire the handler to the S3 client and database backend named in ``settings``."""
    return UploadHandler(
        bucket_name=settings.bucket_name,
        s3_client=get_s3_client(settings),
        database_factory=get_database_factory(settings),
        upload_dir=settings.upload_dir,
    )


def create_app(
    settings: Optional[Settings] = None,
    upload_handler: Optional[UploadHandler] = None,
) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="File Upload API",
        summary="Store uploaded files in S3 and record them in the uploads table",
        version="1.0.0",
        description=dedent(
            """\
        Single-endpoint upload service.

        | Status | Body |
        | --- | --- |
        | 200 | `{"message": "File uploaded successfully", "upload": {...}}` |
        | 400 | `{"error": "No file uploaded"}` |
        | 404 | `{"message": "Route not found"}` |
        | 500 | `{"error": "File upload failed" / "File upload to S3 failed" / "Internal server error"}` |
        """
        ),
        docs_url="/api-docs",
        redoc_url=None,
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.state.settings = settings
    app.state.upload_handler = upload_handler or build_upload_handler(settings)
    logger.info(
        f"Upload API ready (mode={settings.deployment_mode}, database={settings.database_backend})"
    )

    # health first: the uploads router ends in a catch-all route
    app.include_router(health_router, tags=["health"])
    app.include_router(uploads_router, tags=["uploads"])

    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    from upload_api.server import app, settings

    uvicorn.run(app, host=settings.server_host, port=settings.server_port)
