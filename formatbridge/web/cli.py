"""CLI interface for the Format Bridge web API."""

import click
import uvicorn

from shared.cli import info, success
from shared.logger import setup_logger

from .app import app


@click.command()
@click.option(
    "--port",
    "-p",
    type=int,
    default=8000,
    show_default=True,
    envvar="FORMATBRIDGE_PORT",
    help="Port to run server on",
)
@click.option(
    "--host",
    default="127.0.0.1",
    show_default=True,
    envvar="FORMATBRIDGE_HOST",
    help="Host to bind to",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def main(port: int, host: str, verbose: bool):
    """
    Format Bridge Web - HTTP API for conversions and share links.

    Examples:

        \b
        # Start on default port (8000)
        formatbridge-web

        \b
        # Start on custom port
        formatbridge-web --port 8080

    Endpoints:
        GET  /api/formats  - Supported format tags
        POST /api/convert  - Convert text
        POST /api/share    - Build a share-link query string
        GET  /api/share    - Open a share link (pass its query string)
    """
    log_level = "DEBUG" if verbose else "INFO"
    setup_logger(__name__, level=log_level)

    info(f"Starting Format Bridge on http://{host}:{port}")
    info("Press CTRL+C to stop")

    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level="error" if not verbose else "info",
        )
    except KeyboardInterrupt:
        info("Shutting down...")

    success("Format Bridge stopped")


if __name__ == "__main__":
    main()
