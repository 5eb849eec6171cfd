"""Exceptions raised while decoding push deliveries and sending replies."""

from __future__ import annotations

from enum import Enum


class DecodeFailure(str, Enum):
    MALFORMED_ENVELOPE = "malformed_envelope"
    MISSING_PAYLOAD = "missing_payload"
    BAD_ENCODING = "bad_encoding"
    MALFORMED_EVENT = "malformed_event"


class DecodeError(ValueError):
    """A push delivery that can never be processed. Callers drop it."""

    reason: DecodeFailure

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedEnvelopeError(DecodeError):
    reason = DecodeFailure.MALFORMED_ENVELOPE


class MissingPayloadError(DecodeError):
    reason = DecodeFailure.MISSING_PAYLOAD


class BadEncodingError(DecodeError):
    reason = DecodeFailure.BAD_ENCODING


class MalformedEventError(DecodeError):
    reason = DecodeFailure.MALFORMED_EVENT


class ChatClientError(RuntimeError):
    """The chat platform rejected or failed an outbound call."""
