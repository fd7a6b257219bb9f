"""ASGI entrypoint for running the Upload API under uvicorn."""
from upload_api.logging_config import configure_logging
from upload_api.main import create_app
from upload_api.settings import get_settings

settings = get_settings()
configure_logging(settings.log_level)

app = create_app(settings)
