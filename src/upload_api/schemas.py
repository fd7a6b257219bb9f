####################################
# --- Request/response schemas --- #
####################################

from dataclasses import dataclass, field
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

from upload_api.multipart import RequestBody
from upload_api.settings import BUCKET_NAME

UPLOAD_PATH = "/upload"
UPLOAD_FILE_FIELD = "file"


@dataclass
class UploadEvent:
    """Transport-independent request consumed by the upload handler."""

    method: str
    path: str
    body: RequestBody = b""
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class UploadResponse:
    """Transport-independent response; ``body`` is serialized JSON."""

    status_code: int
    body: str


class UploadRecord(BaseModel):
    """A row of the ``uploads`` table. Columns beyond the two below pass through."""

    filename: str = Field(
        description="Original name of the uploaded file.",
        json_schema_extra={"example": "example.jpg"},
    )
    filepath: str = Field(
        description="Public URL of the stored object.",
        json_schema_extra={"example": f"https://{BUCKET_NAME}.s3.amazonaws.com/example.jpg"},
    )

    model_config = ConfigDict(extra="allow")


class UploadSuccessResponse(BaseModel):
    """Response model for a successful `POST /upload`."""

    message: str = "File uploaded successfully"
    upload: UploadRecord


class ErrorResponse(BaseModel):
    """Error envelope for 400 and 500 responses."""

    error: str

    model_config = ConfigDict(
        json_schema_extra={"example": {"error": "File upload to S3 failed"}}
    )


class RouteNotFoundResponse(BaseModel):
    """Envelope returned for any method/path other than `POST /upload`."""

    message: str = "Route not found"


class HealthResponse(BaseModel):
    status: str
    deployment_mode: str
    database_backend: str
    bucket_name: str
