"""Relay handler: routing, validation and the provider round trip.

    GET  /       -> 200 help text
    POST /shout  -> forward to the provider, relay its status and body
    anything else -> 404, empty body

The handler never raises for per-request failures; it returns a
RelayFailure carrying the RelayError so the server can render it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shoutit.errors import RelayError
from shoutit.relay.payload import OutboundPushRequest, decode_message, encode_push_request

if TYPE_CHECKING:
    from shoutit.config import Configuration
    from shoutit.relay.client import ProviderClient
    from shoutit.relay.tracing import RequestTracer

logger = logging.getLogger(__name__)

PROVIDER_URL = "https://onesignal.com/api/v1/notifications"
HELP_TEXT = "Try POSTing data to /shout"


@dataclass(frozen=True)
class RelaySuccess:
    """A response to return to the caller as-is."""

    status: int
    body: bytes = b""
    content_type: str | None = None


@dataclass(frozen=True)
class RelayFailure:
    """A per-request failure to render as an error response."""

    error: RelayError

    @property
    def status(self) -> int:
        return self.error.status_code


RelayOutcome = RelaySuccess | RelayFailure


def build_provider_headers(config: Configuration) -> dict[str, str]:
    """Headers for the provider request.

    The REST API key is sent verbatim after "Basic "; it is already in the
    form the provider expects.
    """
    return {
        "content-type": "application/json",
        "charset": "utf-8",
        "Authorization": f"Basic {config.rest_api_key}",
    }


@dataclass
class RelayHandler:
    """Maps (method, path, body) to a RelayOutcome.

    Holds only shared read-only state: the credentials, the shared provider
    client and the tracer. Safe to call from many concurrent tasks.
    """

    config: Configuration
    client: ProviderClient
    provider_url: str = PROVIDER_URL
    tracer: RequestTracer | None = None

    async def handle(
        self,
        method: str,
        path: str,
        body: bytes,
        trace_id: str | None = None,
    ) -> RelayOutcome:
        if method == "GET" and path == "/":
            return RelaySuccess(200, HELP_TEXT.encode("utf-8"), "text/plain; charset=utf-8")
        if method == "POST" and path == "/shout":
            try:
                return await self._shout(body, trace_id or "-")
            except RelayError as e:
                return RelayFailure(e)
        return RelaySuccess(404)

    async def _shout(self, body: bytes, trace_id: str) -> RelaySuccess:
        """Run the relay pipeline for one POST /shout."""
        inbound = decode_message(body)
        logger.info("[%s] Message: %s", trace_id, inbound.message[:200])

        push = OutboundPushRequest(app_id=self.config.app_id, message=inbound.message)
        payload = encode_push_request(push)
        self._save_debug(trace_id, "1_request.json", push.to_dict())

        response = await self.client.post(
            self.provider_url,
            data=payload,
            headers=build_provider_headers(self.config),
        )

        logger.info("[%s] Provider response: %d", trace_id, response.status)
        if response.status >= 400:
            logger.warning(
                "[%s] Provider error %d: %s",
                trace_id,
                response.status,
                response.body[:500].decode("utf-8", errors="replace"),
            )
        self._save_debug(
            trace_id,
            "2_response.json",
            {
                "status": response.status,
                "body": response.body.decode("utf-8", errors="replace"),
            },
        )

        return RelaySuccess(response.status, response.body, response.content_type)

    def _save_debug(self, trace_id: str, filename: str, data: object) -> None:
        if self.tracer:
            self.tracer.save_debug(trace_id, filename, data)
