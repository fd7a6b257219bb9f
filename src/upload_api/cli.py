# cli.py
import logging

import click

from upload_api.database import get_database_factory
from upload_api.logging_config import configure_logging
from upload_api.settings import get_settings

logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for the Upload API"""
    pass


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    for key, value in settings.describe().items():
        click.echo(f"  {key}: {value}")


@cli.command()
def init_db():
    """Create the uploads table on the configured database"""
    settings = get_settings()
    configure_logging(settings.log_level)

    database = get_database_factory(settings)()
    try:
        database.init_schema()
    except Exception as e:
        raise click.ClickException(f"Failed to initialize {settings.database_backend} database: {e}")
    click.echo(f"uploads table ready ({settings.database_backend})")


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to SERVER_HOST)")
@click.option("--port", default=None, type=int, help="Bind port (defaults to SERVER_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host, port, reload):
    """Run the API locally with uvicorn"""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    host = host or settings.server_host
    port = port or settings.server_port

    click.echo(f"Server listening at http://{host}:{port} (docs at /api-docs)")
    uvicorn.run(
        "upload_api.server:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    cli()
