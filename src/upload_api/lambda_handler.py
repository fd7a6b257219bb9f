"""Lambda handler for the Upload API using Mangum."""
from mangum import Mangum

from upload_api.logging_config import configure_logging
from upload_api.main import create_app
from upload_api.settings import get_settings

settings = get_settings()
configure_logging(settings.log_level)

# Create FastAPI app
app = create_app(settings)

# Wrap with Mangum for Lambda compatibility
handler = Mangum(app, lifespan="off")

# Export handler for Lambda runtime
lambda_handler = handler
