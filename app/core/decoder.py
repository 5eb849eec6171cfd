"""
Envelope decoder.

Peels a push delivery down to the chat event tree:
raw body (JSON) → ``message.data`` (base64) → UTF-8 text → event JSON.
Each failing layer raises its own DecodeError subclass.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from pydantic import ValidationError

from app.core.classifier import classify
from app.core.errors import (
    BadEncodingError,
    MalformedEnvelopeError,
    MalformedEventError,
    MissingPayloadError,
)
from app.schemas.chat_event import ChatEvent
from app.schemas.pubsub import PushEnvelope

logger = logging.getLogger(__name__)


@dataclass
class DecodedDelivery:
    """A push delivery with its event tree recovered."""

    event: dict[str, Any]
    message_id: Optional[str] = None
    subscription: Optional[str] = None
    attributes: dict[str, str] = field(default_factory=dict)


_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


def _b64decode(data: str) -> bytes:
    # Some publishers use the URL-safe alphabet; both are validated strictly.
    padded = (data + "=" * (-len(data) % 4)).translate(_URLSAFE_TO_STANDARD)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise BadEncodingError(f"message.data is not valid base64: {e}") from e


def decode_delivery(raw_body: Union[bytes, str]) -> DecodedDelivery:
    """
    Decode a push delivery body into its event tree.

    Raises:
        MalformedEnvelopeError: body is not a JSON object of the envelope shape.
        MissingPayloadError: ``message.data`` is absent or empty.
        BadEncodingError: ``message.data`` is not base64 of UTF-8 text.
        MalformedEventError: decoded text is not a JSON object.
    """
    try:
        envelope = PushEnvelope.model_validate_json(raw_body)
    except ValidationError as e:
        raise MalformedEnvelopeError(f"Invalid push envelope: {e.error_count()} error(s)") from e

    if envelope.message is None:
        raise MissingPayloadError("Invalid push request: missing 'message' field")
    data = (envelope.message.data or "").strip()
    if not data:
        raise MissingPayloadError("Invalid push request: missing 'data' field")

    try:
        decoded_text = _b64decode(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise BadEncodingError(f"message.data is not UTF-8: {e}") from e
    logger.debug("Decoded push data: %s", decoded_text)

    try:
        event = json.loads(decoded_text)
    except json.JSONDecodeError as e:
        raise MalformedEventError(f"Decoded data is not JSON: {e}") from e
    if not isinstance(event, dict):
        raise MalformedEventError(
            f"Decoded event must be a JSON object, got {type(event).__name__}"
        )

    return DecodedDelivery(
        event=event,
        message_id=envelope.message.message_id,
        subscription=envelope.subscription,
        attributes=envelope.message.attributes,
    )


def decode(raw_body: Union[bytes, str]) -> ChatEvent:
    """Decode a push delivery and classify the event it carries."""
    return classify(decode_delivery(raw_body).event)
