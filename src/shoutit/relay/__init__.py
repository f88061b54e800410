"""Relay pipeline: payload shapes, provider client, handler and tracing."""

from shoutit.relay.client import ProviderClient, ProviderClientConfig, ProviderResponse
from shoutit.relay.handler import (
    HELP_TEXT,
    PROVIDER_URL,
    RelayFailure,
    RelayHandler,
    RelayOutcome,
    RelaySuccess,
)
from shoutit.relay.payload import InboundMessage, OutboundPushRequest
from shoutit.relay.tracing import RequestTracer

__all__ = [
    "HELP_TEXT",
    "PROVIDER_URL",
    "InboundMessage",
    "OutboundPushRequest",
    "ProviderClient",
    "ProviderClientConfig",
    "ProviderResponse",
    "RelayFailure",
    "RelayHandler",
    "RelayOutcome",
    "RelaySuccess",
    "RequestTracer",
]
