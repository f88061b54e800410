"""ShoutIt - a relay from plain HTTP messages to OneSignal push notifications.

Layout:
    config          Credentials file (~/.cogciprocate/shoutit.toml)
    relay/          Payload shapes, shared provider client, relay handler
    server          aiohttp server that dispatches to the relay handler
    cli             `shoutit serve` / `shoutit config`

Usage:
    >>> from shoutit import ServerConfig, ShoutItServer, load_config
    >>> server = ShoutItServer(config=ServerConfig(), credentials=load_config())
    >>> await server.serve()
"""

from shoutit.__version__ import __version__
from shoutit.config import Configuration, load_config
from shoutit.errors import (
    ConfigError,
    ConfigFileError,
    ConfigParseError,
    InternalRelayError,
    InvalidConfigValue,
    MessageDecodeError,
    NoHomeDirectory,
    RelayError,
    ShoutItError,
    UpstreamError,
    UpstreamTimeout,
)
from shoutit.server import ServerConfig, ShoutItServer

__all__ = [
    "__version__",
    "ConfigError",
    "ConfigFileError",
    "ConfigParseError",
    "Configuration",
    "InternalRelayError",
    "InvalidConfigValue",
    "MessageDecodeError",
    "NoHomeDirectory",
    "RelayError",
    "ServerConfig",
    "ShoutItError",
    "ShoutItServer",
    "UpstreamError",
    "UpstreamTimeout",
    "load_config",
]
