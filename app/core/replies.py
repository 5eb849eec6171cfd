"""
Reply builders and Chat API rendering.

Builders are pure: they return ReplyRequest values. ``render_message`` turns a
ReplyRequest into the REST-shaped message body the chat client sends.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from app.constants.chat import UPDATE_MESSAGE_FIELDS
from app.schemas.reply import (
    Button,
    ButtonListWidget,
    CardDefinition,
    DecoratedTextWidget,
    ReplyRequest,
    SelectionInputWidget,
    Widget,
)


def build_text_reply(
    space_name: str, text: str, thread_name: Optional[str] = None
) -> ReplyRequest:
    return ReplyRequest(parent=space_name, text=text, thread=thread_name or None)


def build_card_reply(
    space_name: str,
    card: CardDefinition,
    thread_name: Optional[str] = None,
    text: Optional[str] = None,
) -> ReplyRequest:
    return ReplyRequest(parent=space_name, text=text, card=card, thread=thread_name or None)


def build_update_reply(
    space_name: str,
    message_name: str,
    text: str,
    card: Optional[CardDefinition] = None,
    fields: Iterable[str] = UPDATE_MESSAGE_FIELDS,
) -> ReplyRequest:
    """Reply that rewrites an existing message. Listed fields absent here are cleared."""
    return ReplyRequest(
        parent=space_name,
        text=text,
        card=card,
        update_target_message_name=message_name,
        update_field_mask=set(fields),
    )


def render_button(button: Button) -> dict[str, Any]:
    action: dict[str, Any] = {"function": button.action.function_id}
    if button.action.parameters:
        action["parameters"] = [
            {"key": key, "value": value} for key, value in button.action.parameters.items()
        ]
    return {"text": button.text, "onClick": {"action": action}}


def render_widget(widget: Widget) -> dict[str, Any]:
    if isinstance(widget, ButtonListWidget):
        return {"buttonList": {"buttons": [render_button(b) for b in widget.buttons]}}
    if isinstance(widget, DecoratedTextWidget):
        body: dict[str, Any] = {"text": widget.text}
        if widget.button is not None:
            body["button"] = render_button(widget.button)
        return {"decoratedText": body}
    if isinstance(widget, SelectionInputWidget):
        body = {
            "name": widget.name,
            "label": widget.label,
            "type": "MULTI_SELECT" if widget.multi_select else "DROPDOWN",
        }
        if widget.items:
            body["items"] = [
                {"text": item.text, "value": item.value, "selected": item.selected}
                for item in widget.items
            ]
        if widget.multi_select and widget.max_selected is not None:
            body["multiSelectMaxSelectedItems"] = widget.max_selected
        if widget.platform_source is not None:
            body["platformDataSource"] = {"commonDataSource": widget.platform_source.value}
        return {"selectionInput": body}
    raise TypeError(f"Unsupported widget: {type(widget).__name__}")


def render_card(card: CardDefinition) -> dict[str, Any]:
    return {
        "cardId": card.id,
        "card": {
            "header": {"title": card.title},
            "sections": [{"widgets": [render_widget(w) for w in card.widgets]}],
        },
    }


def render_message(reply: ReplyRequest) -> dict[str, Any]:
    """Chat API message body for a create or update call."""
    message: dict[str, Any] = {}
    if reply.is_update:
        message["name"] = reply.update_target_message_name
    if reply.text is not None:
        message["text"] = reply.text
    if reply.card is not None:
        message["cardsV2"] = [render_card(reply.card)]
    elif reply.is_update and "cards_v2" in reply.update_field_mask:
        message["cardsV2"] = []
    if reply.thread and not reply.is_update:
        message["thread"] = {"name": reply.thread}
    return message
