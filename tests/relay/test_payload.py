"""Tests for inbound decoding and outbound payload construction."""

import json

import pytest

from shoutit.errors import InternalRelayError, MessageDecodeError
from shoutit.relay.payload import (
    InboundMessage,
    OutboundPushRequest,
    decode_message,
    encode_push_request,
)


class TestDecodeMessage:
    def test_valid_message(self):
        assert decode_message(b'{"message": "hi"}') == InboundMessage(message="hi")

    def test_extra_keys_ignored(self):
        assert decode_message(b'{"message": "hi", "sender": "bob"}').message == "hi"

    def test_empty_message_allowed(self):
        assert decode_message(b'{"message": ""}').message == ""

    @pytest.mark.parametrize(
        "body",
        [
            b"",
            b"not json",
            b"{not valid json",
            b'["message"]',
            b'"hi"',
            b"{}",
            b'{"msg": "hi"}',
            b'{"message": 42}',
            b'{"message": null}',
            b'{"message": ["hi"]}',
            b'{"message": "\xc3\x28"}',
            b'{"message": "\\ud800"}',
            '{"message": "hi"}'.encode("utf-16"),
            '{"message": "hi"}'.encode("utf-16-le"),
            '{"message": "hi"}'.encode("utf-32-le"),
            b"\xef\xbb\xbf" + b'{"message": "hi"}',
        ],
    )
    def test_invalid_bodies(self, body):
        with pytest.raises(MessageDecodeError) as exc_info:
            decode_message(body)

        assert exc_info.value.status_code == 400


class TestOutboundPushRequest:
    def test_provider_shape(self):
        request = OutboundPushRequest(app_id="app-123", message="hello")

        assert request.to_dict() == {
            "app_id": "app-123",
            "contents": {"en": "hello"},
            "included_segments": ["All"],
        }

    @pytest.mark.parametrize(
        "message",
        [
            "hi",
            "",
            'quotes " and \\ backslashes',
            "line\nbreak\ttab",
            "ünïcødé ✓ 🎉",
            "{\"app_id\": \"injected\"}",
            "x" * 10_000,
        ],
    )
    def test_message_survives_encoding(self, message):
        """contents.en is the message exactly and segments are always ["All"]."""
        encoded = encode_push_request(OutboundPushRequest(app_id="app-123", message=message))
        decoded = json.loads(encoded.decode("utf-8"))

        assert decoded["contents"]["en"] == message
        assert decoded["included_segments"] == ["All"]
        assert decoded["app_id"] == "app-123"

    def test_encoding_is_utf8(self):
        encoded = encode_push_request(OutboundPushRequest(app_id="a", message="é"))

        assert "é".encode("utf-8") in encoded

    def test_serialization_failure_is_internal_error(self):
        request = OutboundPushRequest(app_id="a", message=object())  # type: ignore[arg-type]

        with pytest.raises(InternalRelayError) as exc_info:
            encode_push_request(request)

        assert exc_info.value.status_code == 500
