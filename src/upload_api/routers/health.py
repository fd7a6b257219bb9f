from fastapi import APIRouter, Request

from upload_api.schemas import HealthResponse
from upload_api.settings import Settings

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Liveness endpoint.

    Reports the deployment mode and the storage targets without touching them;
    the database and S3 are only contacted while handling an upload.
    """
    settings: Settings = request.app.state.settings
    return HealthResponse(
        status="ok",
        deployment_mode=settings.deployment_mode,
        database_backend=settings.database_backend,
        bucket_name=settings.bucket_name,
    )
