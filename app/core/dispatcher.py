"""
Event dispatcher.

Turns a classified ChatEvent into at most one ReplyRequest. Planning is pure;
the webhook command sends whatever is planned. Two policies apply:

* silent drop: unknown shape, bot sender, or no resolvable space.
* visible fallback: unknown command id or card action gets a fixed text reply.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional

from app.constants import chat as c
from app.core import cards
from app.core.replies import build_card_reply, build_text_reply, build_update_reply
from app.schemas.chat_event import ChatEvent, EventKind
from app.schemas.reply import CardDefinition, ReplyRequest

logger = logging.getLogger(__name__)

Handler = Callable[[ChatEvent], Optional[ReplyRequest]]


def _card_command(build_card: Callable[[], CardDefinition]) -> Handler:
    def handle(event: ChatEvent) -> ReplyRequest:
        return build_card_reply(event.space_name, build_card(), event.thread_name)

    return handle


def _pubsub_test(event: ChatEvent) -> ReplyRequest:
    return build_text_reply(event.space_name, c.PUBSUB_TEST_TEXT, event.thread_name)


COMMAND_HANDLERS: dict[int, Handler] = {
    c.CMD_PUBSUB_TEST: _pubsub_test,
    c.CMD_CREATE_CARD: _card_command(cards.build_button_card),
    c.CMD_UPDATE_CARD: _card_command(cards.build_update_message_card),
    c.CMD_MULTI_SELECTION_CARD: _card_command(
        lambda: cards.build_text_selection_card(multi_select=True)
    ),
    c.CMD_USER_SELECTION_CARD: _card_command(cards.build_user_selection_card),
    c.CMD_ACCESSORY_CARD: _card_command(cards.build_accessory_card),
    c.CMD_SINGLE_SELECTION_CARD: _card_command(
        lambda: cards.build_text_selection_card(multi_select=False)
    ),
}


def _acknowledge_click(event: ChatEvent) -> ReplyRequest:
    for key, value in event.parameters.items():
        logger.debug("Card click param: %s = %s", key, value)
    return build_text_reply(
        event.space_name,
        c.BUTTON_CLICKED_TEXT.format(action=c.ACTION_CARD_CLICK),
        event.thread_name,
    )


def _update_original_message(event: ChatEvent) -> ReplyRequest:
    if not event.message_name:
        logger.error(
            "Cannot update message in %s: click payload has no message name",
            event.space_name,
        )
        return build_text_reply(event.space_name, c.UPDATE_FAILED_TEXT, event.thread_name)
    return build_update_reply(event.space_name, event.message_name, c.MESSAGE_UPDATED_TEXT)


def _submit_selection(event: ChatEvent) -> ReplyRequest:
    selected = event.form_inputs.get(c.SELECTION_FIELD) or []
    values = ", ".join(selected) if selected else c.SELECTION_EMPTY
    return build_text_reply(
        event.space_name, c.SELECTION_TEXT.format(values=values), event.thread_name
    )


def _accessory_click(event: ChatEvent) -> ReplyRequest:
    item = event.parameters.get(c.ACCESSORY_ITEM_PARAMETER) or c.ACCESSORY_UNKNOWN_ITEM
    return build_text_reply(
        event.space_name, c.ACCESSORY_CLICKED_TEXT.format(item=item), event.thread_name
    )


CARD_ACTIONS: dict[str, Handler] = {
    c.ACTION_CARD_CLICK: _acknowledge_click,
    c.ACTION_UPDATE_MESSAGE: _update_original_message,
    c.ACTION_SUBMIT_SELECTION: _submit_selection,
    c.ACTION_ACCESSORY_CLICK: _accessory_click,
}


def resolve_card_action(
    event: ChatEvent, actions: Mapping[str, Handler] = CARD_ACTIONS
) -> Optional[str]:
    """
    Return the known action a card click refers to, or None.

    The invoked function is checked first; older cards routed every button
    through one function and named the action in a parameter instead.
    """
    if event.action_id in actions:
        return event.action_id
    for key in c.ACTION_PARAMETER_KEYS:
        value = event.parameters.get(key)
        if value in actions:
            return value
    return None


class ChatEventDispatcher:
    """Plans the reply for a ChatEvent using the command and card action tables."""

    def __init__(
        self,
        command_handlers: Optional[Mapping[int, Handler]] = None,
        card_actions: Optional[Mapping[str, Handler]] = None,
    ) -> None:
        self._commands = dict(COMMAND_HANDLERS if command_handlers is None else command_handlers)
        self._card_actions = dict(CARD_ACTIONS if card_actions is None else card_actions)
        self._kind_handlers: dict[EventKind, Handler] = {
            EventKind.MESSAGE: self.handle_message,
            EventKind.APP_COMMAND: self.handle_app_command,
            EventKind.CARD_CLICK: self.handle_card_click,
            EventKind.ADDED_TO_SPACE: self.handle_added_to_space,
        }

    def plan_reply(self, event: ChatEvent) -> Optional[ReplyRequest]:
        """Return the reply for ``event``, or None when the event is dropped."""
        handler = self._kind_handlers.get(event.kind)
        if handler is None:
            logger.warning("Dropping chat event of kind %s", event.kind.value)
            return None
        if event.is_from_bot:
            logger.info("Ignoring %s event from BOT sender.", event.kind.value)
            return None
        if not event.space_name:
            logger.warning(
                "Dropping %s event: could not resolve a space name", event.kind.value
            )
            return None
        return handler(event)

    def handle_message(self, event: ChatEvent) -> ReplyRequest:
        sender_name = event.sender.display_name if event.sender else ""
        text = event.text or c.EMPTY_TEXT_PLACEHOLDER
        return build_text_reply(
            event.space_name,
            c.MESSAGE_REPLY_TEMPLATE.format(sender=sender_name, text=text),
            event.thread_name,
        )

    def handle_app_command(self, event: ChatEvent) -> Optional[ReplyRequest]:
        logger.info("App command ID: %s", event.command_id)
        handler = self._commands.get(event.command_id) if event.command_id is not None else None
        if handler is None:
            logger.warning("Unhandled app command ID: %s", event.command_id)
            return build_text_reply(event.space_name, c.UNKNOWN_COMMAND_TEXT, event.thread_name)
        return handler(event)

    def handle_card_click(self, event: ChatEvent) -> Optional[ReplyRequest]:
        action = resolve_card_action(event, self._card_actions)
        logger.info("Card click invokedFunction: %s (resolved: %s)", event.action_id, action)
        if action is None:
            logger.warning("Unhandled card action: %s", event.action_id)
            return build_text_reply(
                event.space_name,
                c.UNKNOWN_ACTION_TEXT.format(action=event.action_id or c.UNKNOWN_ACTION_ID),
                event.thread_name,
            )
        return self._card_actions[action](event)

    def handle_added_to_space(self, event: ChatEvent) -> ReplyRequest:
        return build_text_reply(event.space_name, c.WELCOME_TEXT)
