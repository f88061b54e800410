"""Error types for the ShoutIt relay.

Two failure domains:
- ConfigError: raised while loading credentials. Always fatal at startup.
- RelayError: raised while handling one request. Turned into an HTTP
  response at the handler boundary and never escapes to the server.
"""

from __future__ import annotations

from pathlib import Path

REQUIRED_KEYS = ("app_id", "rest_api_key")


class ShoutItError(Exception):
    """Base class for all ShoutIt errors."""


class ConfigError(ShoutItError):
    """Raised when the configuration file cannot be turned into credentials."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class NoHomeDirectory(ConfigError):
    """Raised when the current user's home directory cannot be resolved."""


class ConfigFileError(ConfigError):
    """Raised when the config file or its directory cannot be created or read."""


class ConfigParseError(ConfigError):
    """Raised when the config document is malformed or lacks required keys."""

    def __init__(self, reason: str, path: Path):
        keys = " and ".join(f"'{key} = YOUR_{key.upper()}'" for key in REQUIRED_KEYS)
        super().__init__(
            f"Error parsing ShoutIt config file: {reason}. "
            f"Please add {keys} lines to '{path}'.",
            path,
        )
        self.reason = reason


class InvalidConfigValue(ConfigError):
    """Raised when a credential is empty or unsafe as an HTTP header value."""

    def __init__(self, key: str, reason: str, path: Path | None = None):
        location = f" in '{path}'" if path else ""
        super().__init__(f"Invalid value for '{key}'{location}: {reason}", path)
        self.key = key


class RelayError(ShoutItError):
    """Raised when a single relay request fails.

    Subclasses pin the HTTP status and error type reported to the caller.
    """

    status_code = 500
    error_type = "relay_error"


class MessageDecodeError(RelayError):
    """Raised when the inbound body is not a valid message document."""

    status_code = 400
    error_type = "message_decode_error"


class UpstreamError(RelayError):
    """Raised when the provider cannot be reached at the transport level."""

    status_code = 502
    error_type = "upstream_error"


class UpstreamTimeout(UpstreamError):
    """Raised when the provider does not answer within the configured timeout."""

    status_code = 504
    error_type = "upstream_timeout"


class InternalRelayError(RelayError):
    """Raised for failures that well-formed internal data should never cause."""

    status_code = 500
    error_type = "internal_error"
