"""
Normalized chat event produced by the classifier.

Every inbound push delivery is reduced to one ChatEvent regardless of which
payload revision it arrived in.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class EventKind(str, Enum):
    """Closed set of event shapes the dispatcher knows how to handle."""

    MESSAGE = "message"
    APP_COMMAND = "app_command"
    CARD_CLICK = "card_click"
    ADDED_TO_SPACE = "added_to_space"
    UNKNOWN = "unknown"


class SenderType(str, Enum):
    HUMAN = "HUMAN"
    BOT = "BOT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SenderType":
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.upper())
        except ValueError:
            return cls.UNKNOWN


class DeliveryState(str, Enum):
    """Per-request lifecycle. HANDLED and DROPPED are terminal."""

    RECEIVED = "received"
    DECODED = "decoded"
    CLASSIFIED = "classified"
    HANDLED = "handled"
    DROPPED = "dropped"


class Sender(BaseModel):
    display_name: str = ""
    sender_type: SenderType = SenderType.UNKNOWN


class ChatEvent(BaseModel):
    """Decoded, normalized chat event (decoder → dispatcher)."""

    kind: EventKind
    space_name: Optional[str] = None
    thread_name: Optional[str] = None
    sender: Optional[Sender] = None
    text: Optional[str] = None
    command_id: Optional[int] = None
    action_id: Optional[str] = None
    parameters: dict[str, str] = Field(default_factory=dict)
    # Selected values per form input name (card clicks only).
    form_inputs: dict[str, list[str]] = Field(default_factory=dict)
    # Resource name of the message a card click originated from.
    message_name: Optional[str] = None
    matched_probe: Optional[str] = None
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    @property
    def is_from_bot(self) -> bool:
        return self.sender is not None and self.sender.sender_type == SenderType.BOT
