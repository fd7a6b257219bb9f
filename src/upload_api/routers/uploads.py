from fastapi import APIRouter, Request, Response
from starlette.types import Receive, Scope, Send

from upload_api.handler import UploadHandler
from upload_api.schemas import (
    UPLOAD_FILE_FIELD,
    UPLOAD_PATH,
    ErrorResponse,
    UploadEvent,
    UploadSuccessResponse,
)

router = APIRouter()

UPLOAD_REQUEST_BODY = {
    "requestBody": {
        "required": True,
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {
                        UPLOAD_FILE_FIELD: {
                            "type": "string",
                            "format": "binary",
                            "description": "The file to upload",
                        }
                    },
                }
            }
        },
    }
}


async def _dispatch(request: Request) -> Response:
    """Translate a Starlette request into an UploadEvent and back."""
    handler: UploadHandler = request.app.state.upload_handler
    event = UploadEvent(
        method=request.method,
        path=request.url.path,
        headers=dict(request.headers),
        body=request.stream(),
    )
    result = await handler.handle(event)
    return Response(
        content=result.body,
        status_code=result.status_code,
        media_type="application/json",
    )


@router.post(
    UPLOAD_PATH,
    summary="Upload a file",
    response_model=UploadSuccessResponse,
    responses={
        400: {"model": ErrorResponse, "description": "No file uploaded"},
        500: {"model": ErrorResponse, "description": "File upload failed, S3 write failed, or internal error"},
    },
    openapi_extra=UPLOAD_REQUEST_BODY,
)
async def upload_file(request: Request) -> Response:
    """
    Upload a file.

    The `file` part is stored in S3 under its original filename and an
    `uploads` row is created that points at the object's URL.
    """
    return await _dispatch(request)


class RouteNotFoundApp:
    """
    Plain ASGI endpoint for every other method/path; the handler answers 404.

    Registered without a method list so that no request ends in a 405.
    """

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        response = await _dispatch(Request(scope, receive))
        await response(scope, receive, send)


router.add_route("/{unmatched_path:path}", RouteNotFoundApp(), include_in_schema=False)
