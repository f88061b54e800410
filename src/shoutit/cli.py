"""CLI entry point."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from pathlib import Path

import rich_click as click

from shoutit.__version__ import __version__
from shoutit.config import Configuration, default_config_path, load_config
from shoutit.errors import ConfigError
from shoutit.logging_config import configure_logging
from shoutit.relay.handler import PROVIDER_URL
from shoutit.server import ServerConfig, ShoutItServer

logger = logging.getLogger(__name__)

click.rich_click.USE_MARKDOWN = True
click.rich_click.MAX_WIDTH = 100

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _load_config_or_exit(config_path: str | None) -> tuple[Path, Configuration]:
    try:
        path = Path(config_path) if config_path else default_config_path()
        return path, load_config(path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        if e.path:
            click.echo(f"Config file: {e.path}", err=True)
        sys.exit(1)


async def _run_server(server: ShoutItServer) -> None:
    loop = asyncio.get_running_loop()

    def handle_signal() -> None:
        server.request_shutdown()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, handle_signal)

    try:
        await server.serve()
    finally:
        await server.shutdown()


@click.group()
@click.version_option(__version__, prog_name="shoutit")
def cli():
    """ShoutIt - relay messages to OneSignal push notifications.

    Credentials are read from `~/.cogciprocate/shoutit.toml`:

        app_id = "YOUR_APP_ID"
        rest_api_key = "YOUR_REST_API_KEY"
    """


@cli.command()
@click.option("--host", default="0.0.0.0", envvar="SHOUTIT_HOST", show_default=True,
              help="Address to bind")
@click.option("--port", default=8080, type=int, envvar="SHOUTIT_PORT", show_default=True,
              help="Port to bind")
@click.option("--config", "config_path", default=None, envvar="SHOUTIT_CONFIG",
              help="Config file path (default: ~/.cogciprocate/shoutit.toml)")
@click.option("--provider-url", default=PROVIDER_URL, envvar="SHOUTIT_PROVIDER_URL",
              show_default=True, help="Provider notification endpoint")
@click.option("--timeout", default=30.0, type=float, show_default=True,
              help="Provider request timeout in seconds")
@click.option("--debug-dir", default=None, envvar="SHOUTIT_DEBUG_DIR",
              help="Directory for request/response debug dumps")
@click.option("--log-level", default=None, type=click.Choice(LOG_LEVELS, case_sensitive=False),
              help="Log level (default: SHOUTIT_LOG_LEVEL or INFO)")
def serve(
    host: str,
    port: int,
    config_path: str | None,
    provider_url: str,
    timeout: float,
    debug_dir: str | None,
    log_level: str | None,
):
    """Start the relay server.

    **Examples:**

        shoutit serve

        shoutit serve --port 9000 --debug-dir /tmp/shoutit-debug
    """
    configure_logging(level=log_level)
    _, credentials = _load_config_or_exit(config_path)

    server = ShoutItServer(
        config=ServerConfig(
            host=host,
            port=port,
            provider_url=provider_url,
            read_timeout=timeout,
            debug_dir=debug_dir,
        ),
        credentials=credentials,
    )
    try:
        asyncio.run(_run_server(server))
    except OSError as e:
        # Typically the port is already in use
        logger.error("Server error: %s", e)
        sys.exit(1)


@cli.command()
@click.option("--config", "config_path", default=None, envvar="SHOUTIT_CONFIG",
              help="Config file path (default: ~/.cogciprocate/shoutit.toml)")
def config(config_path: str | None):
    """Create (if needed) and validate the config file."""
    path, credentials = _load_config_or_exit(config_path)
    click.echo(f"Config file: {path}")
    click.echo(f"Config OK (app_id: {credentials.app_id})")


def main() -> None:
    """Main entry point for the CLI."""
    cli()
