"""Inbound and outbound message shapes.

Inbound (from the caller):
    {"message": "Hello"}

Outbound (to the provider):
    {"app_id": "...", "contents": {"en": "Hello"}, "included_segments": ["All"]}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from shoutit.errors import InternalRelayError, MessageDecodeError

# Every push goes to the provider's built-in "All" segment
DEFAULT_SEGMENTS = ("All",)


@dataclass(frozen=True)
class InboundMessage:
    """A message posted to /shout."""

    message: str


@dataclass(frozen=True)
class OutboundPushRequest:
    """A notification request in the provider's schema."""

    app_id: str
    message: str
    included_segments: tuple[str, ...] = field(default=DEFAULT_SEGMENTS)

    def to_dict(self) -> dict[str, Any]:
        return {
            "app_id": self.app_id,
            "contents": {"en": self.message},
            "included_segments": list(self.included_segments),
        }


def decode_message(body: bytes) -> InboundMessage:
    """Decode a buffered request body into an InboundMessage.

    Extra keys are ignored; "message" must be present and a string.

    Raises:
        MessageDecodeError: If the body is not a valid message document.
    """
    # json.loads would sniff UTF-16/32 on bytes; only UTF-8 is accepted
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as err:
        raise MessageDecodeError(f"Request body is not valid UTF-8: {err.reason}") from err

    try:
        document = json.loads(text)
    except json.JSONDecodeError as err:
        raise MessageDecodeError(f"Invalid JSON: {err}") from err

    if not isinstance(document, dict):
        raise MessageDecodeError(
            f"Expected a JSON object, got {type(document).__name__}"
        )
    if "message" not in document:
        raise MessageDecodeError("Missing field 'message'")

    message = document["message"]
    if not isinstance(message, str):
        raise MessageDecodeError(
            f"Field 'message' must be a string, got {type(message).__name__}"
        )
    try:
        message.encode("utf-8")
    except UnicodeEncodeError as err:
        # Lone surrogates from "\ud800"-style escapes
        raise MessageDecodeError(f"Field 'message' is not valid unicode: {err.reason}") from err

    return InboundMessage(message=message)


def encode_push_request(request: OutboundPushRequest) -> bytes:
    """Serialize an outbound request to UTF-8 JSON.

    Raises:
        InternalRelayError: If the request cannot be serialized.
    """
    try:
        return json.dumps(request.to_dict(), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as err:
        raise InternalRelayError(f"Failed to serialize provider request: {err}") from err
