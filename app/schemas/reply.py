"""
Outbound reply contracts.

ReplyRequest is what the dispatcher produces; the send command renders it into
a Chat API message body. Card widgets form a tagged union on ``type``.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class CardAction(BaseModel):
    function_id: str
    parameters: dict[str, str] = Field(default_factory=dict)


class Button(BaseModel):
    text: str
    action: CardAction


class SelectionItem(BaseModel):
    text: str
    value: str
    selected: bool = False


class PlatformSource(str, Enum):
    """Data sources the chat platform can populate a selection input from."""

    USER = "USER"


class ButtonListWidget(BaseModel):
    type: Literal["button_list"] = "button_list"
    buttons: list[Button]


class SelectionInputWidget(BaseModel):
    type: Literal["selection_input"] = "selection_input"
    name: str
    label: str
    multi_select: bool = False
    max_selected: Optional[int] = None
    items: list[SelectionItem] = Field(default_factory=list)
    platform_source: Optional[PlatformSource] = None


class DecoratedTextWidget(BaseModel):
    type: Literal["decorated_text"] = "decorated_text"
    text: str
    button: Optional[Button] = None


Widget = Annotated[
    Union[ButtonListWidget, SelectionInputWidget, DecoratedTextWidget],
    Field(discriminator="type"),
]


class CardDefinition(BaseModel):
    id: str
    title: str
    widgets: list[Widget] = Field(default_factory=list)


class ReplyRequest(BaseModel):
    """
    A single outbound call. ``parent`` is the target space.
    When ``update_target_message_name`` is set the reply updates that message
    instead of creating a new one.
    """

    parent: str
    text: Optional[str] = None
    thread: Optional[str] = None
    card: Optional[CardDefinition] = None
    update_target_message_name: Optional[str] = None
    update_field_mask: set[str] = Field(default_factory=set)

    @property
    def is_update(self) -> bool:
        return bool(self.update_target_message_name)


class SentMessageRef(BaseModel):
    """Identity of a message returned by the chat platform."""

    name: Optional[str] = None
    space_name: str
    thread_name: Optional[str] = None
