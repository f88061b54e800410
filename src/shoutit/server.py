"""HTTP server for the ShoutIt relay.

One aiohttp application with a single catch-all route. Every request body is
read in full, handed to the RelayHandler, and the RelayOutcome is rendered
back to the caller. Connections are served concurrently on the event loop;
a slow provider call only suspends its own request.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from aiohttp import web

from shoutit.errors import InternalRelayError
from shoutit.relay.client import ProviderClient, ProviderClientConfig
from shoutit.relay.handler import (
    PROVIDER_URL,
    RelayFailure,
    RelayHandler,
    RelayOutcome,
)
from shoutit.relay.tracing import RequestTracer

if TYPE_CHECKING:
    from shoutit.config import Configuration

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
    """Configuration for the relay server."""

    host: str = "0.0.0.0"
    port: int = 8080

    # Provider endpoint
    provider_url: str = PROVIDER_URL

    # Client configuration
    connect_timeout: float = 10.0
    read_timeout: float = 30.0
    connection_limit: int = 100

    # Request limits
    max_body_size: int = 1024 * 1024  # 1MB

    # Debug: save outbound payloads and provider responses to files
    debug_dir: str | None = None  # e.g., "/tmp/shoutit-debug"


def render_outcome(outcome: RelayOutcome) -> web.Response:
    """Translate a RelayOutcome into an aiohttp response."""
    if isinstance(outcome, RelayFailure):
        return web.json_response(
            {
                "error": {
                    "type": outcome.error.error_type,
                    "message": str(outcome.error),
                }
            },
            status=outcome.status,
        )

    headers = {"Content-Type": outcome.content_type} if outcome.content_type else None
    return web.Response(status=outcome.status, body=outcome.body, headers=headers)


@dataclass
class ShoutItServer:
    """Relay server that forwards /shout messages to the push provider.

    Example:
        >>> server = ShoutItServer(config=ServerConfig(port=8080), credentials=load_config())
        >>> await server.serve()
    """

    config: ServerConfig
    credentials: Configuration
    _client: ProviderClient | None = None
    _handler: RelayHandler | None = None
    _app: Any = None  # aiohttp.web.Application
    _runner: Any = None  # aiohttp.web.AppRunner
    _shutdown_event: asyncio.Event = field(default_factory=asyncio.Event)
    _tracer: RequestTracer = field(init=False)

    def __post_init__(self) -> None:
        self._tracer = RequestTracer(debug_dir=self.config.debug_dir)

    @property
    def bound_port(self) -> int | None:
        """Port the listener is bound to, once started."""
        if not self._runner or not self._runner.addresses:
            return None
        return self._runner.addresses[0][1]

    def build_app(self) -> web.Application:
        """Create the web application. Requires the handler to be set up."""
        app = web.Application(client_max_size=self.config.max_body_size)
        app.router.add_route("*", "/{tail:.*}", self._dispatch)
        return app

    async def start(self) -> None:
        """Create the shared provider client and bind the listener."""
        self._client = ProviderClient(
            ProviderClientConfig(
                connect_timeout=self.config.connect_timeout,
                read_timeout=self.config.read_timeout,
                connection_limit=self.config.connection_limit,
            )
        )
        await self._client.connect()
        self._handler = RelayHandler(
            config=self.credentials,
            client=self._client,
            provider_url=self.config.provider_url,
            tracer=self._tracer,
        )

        self._app = self.build_app()
        self._runner = web.AppRunner(self._app, access_log=None)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.config.host, self.config.port)
        await site.start()

        logger.info("ShoutIt server started.")
        logger.info("Listening on http://%s:%d", self.config.host, self.bound_port)
        logger.info("Forwarding to: %s", self.config.provider_url)
        if self.config.debug_dir:
            logger.info("Debug files will be saved to: %s", self.config.debug_dir)

    async def serve(self) -> None:
        """Start the server and run until shutdown() is called."""
        await self.start()
        await self._shutdown_event.wait()

    def request_shutdown(self) -> None:
        """Ask serve() to return. Safe to call from a signal handler."""
        self._shutdown_event.set()

    async def shutdown(self) -> None:
        """Stop accepting connections and release the provider client."""
        self._shutdown_event.set()
        if self._runner is None and self._client is None:
            return
        logger.info("ShoutIt server shutting down.")
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
        if self._client:
            await self._client.close()
            self._client = None

    async def _dispatch(self, request: web.Request) -> web.Response:
        """Handle every request: buffer the body, relay, render."""
        if self._handler is None:
            raise RuntimeError("Server not started. Call start() first.")

        method, path = request.method, request.path
        trace_id = self._tracer.generate_trace_id(method, path)
        start_time = time.monotonic()

        try:
            body = await request.read()
        except web.HTTPException as e:
            # e.g. 413 when the body exceeds max_body_size
            self._tracer.log_response(
                trace_id, method, path, e.status, time.monotonic() - start_time, error=e.reason
            )
            raise
        except (ConnectionResetError, asyncio.CancelledError):
            self._tracer.log_response(
                trace_id,
                method,
                path,
                499,
                time.monotonic() - start_time,
                error="Client disconnected while sending body",
            )
            raise
        self._tracer.log_request(trace_id, method, path, len(body))

        try:
            outcome = await self._handler.handle(method, path, body, trace_id=trace_id)
        except Exception as e:
            logger.exception("[%s] Unexpected error handling %s %s", trace_id, method, path)
            outcome = RelayFailure(InternalRelayError(f"Internal error: {type(e).__name__}"))

        error = str(outcome.error) if isinstance(outcome, RelayFailure) else None
        self._tracer.log_response(
            trace_id,
            method,
            path,
            outcome.status,
            time.monotonic() - start_time,
            error=error,
        )
        return render_outcome(outcome)
