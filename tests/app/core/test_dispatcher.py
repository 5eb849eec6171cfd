"""Tests for reply planning per event kind."""

import pytest

from app.constants import chat as c
from app.core.classifier import classify
from app.core.dispatcher import ChatEventDispatcher, resolve_card_action
from app.schemas.chat_event import ChatEvent, EventKind, Sender, SenderType
from tests.fixtures.chat_event_fixtures import (
    MESSAGE_NAME,
    SPACE,
    THREAD,
    added_to_space_event,
    app_command_event,
    card_click_event,
    legacy_event,
    message_event,
)


@pytest.fixture
def dispatcher():
    return ChatEventDispatcher()


def plan(dispatcher, tree):
    return dispatcher.plan_reply(classify(tree))


class TestMessage:
    def test_reply_template(self, dispatcher):
        reply = plan(dispatcher, message_event(text="Hello", display_name="Tester"))
        assert reply.text == "Hello Tester, you said: Hello"
        assert reply.parent == SPACE
        assert reply.thread == THREAD
        assert reply.card is None

    @pytest.mark.parametrize("text", [None, ""])
    def test_empty_text_uses_placeholder(self, dispatcher, text):
        reply = plan(dispatcher, message_event(text=text))
        assert reply.text == f"Hello Tester, you said: {c.EMPTY_TEXT_PLACEHOLDER}"

    def test_unthreaded_message(self, dispatcher):
        reply = plan(dispatcher, message_event(thread=None))
        assert reply.thread is None

    @pytest.mark.parametrize("text", ["Hello", "", None])
    def test_bot_sender_is_suppressed(self, dispatcher, text):
        assert plan(dispatcher, message_event(text=text, sender_type="BOT")) is None

    def test_missing_space_is_dropped(self, dispatcher):
        assert plan(dispatcher, message_event(space=None)) is None


class TestAppCommand:
    def test_text_command(self, dispatcher):
        reply = plan(dispatcher, app_command_event(c.CMD_PUBSUB_TEST))
        assert reply.text == c.PUBSUB_TEST_TEXT
        assert reply.thread == THREAD

    @pytest.mark.parametrize(
        "command_id,card_id",
        [
            (c.CMD_CREATE_CARD, "interactive-card-1"),
            (c.CMD_UPDATE_CARD, "update-message-card"),
            (c.CMD_MULTI_SELECTION_CARD, "multi-selection-card"),
            (c.CMD_USER_SELECTION_CARD, "user-selection-card"),
            (c.CMD_ACCESSORY_CARD, "accessory-card"),
            (c.CMD_SINGLE_SELECTION_CARD, "single-selection-card"),
        ],
    )
    def test_card_commands(self, dispatcher, command_id, card_id):
        reply = plan(dispatcher, app_command_event(command_id))
        assert reply.card.id == card_id
        assert reply.thread == THREAD
        assert not reply.is_update

    def test_unknown_command_gets_fixed_reply(self, dispatcher):
        reply = plan(dispatcher, app_command_event(999))
        assert reply.text == c.UNKNOWN_COMMAND_TEXT
        assert reply.parent == SPACE

    def test_missing_command_id_gets_fixed_reply(self, dispatcher):
        tree = app_command_event(1)
        del tree["chat"]["appCommandPayload"]["appCommandMetadata"]
        assert plan(dispatcher, tree).text == c.UNKNOWN_COMMAND_TEXT

    def test_custom_command_table(self):
        dispatcher = ChatEventDispatcher(command_handlers={})
        assert plan(dispatcher, app_command_event(1)).text == c.UNKNOWN_COMMAND_TEXT


class TestCardClick:
    def test_generic_acknowledgment(self, dispatcher):
        reply = plan(
            dispatcher,
            card_click_event(c.ACTION_CARD_CLICK, parameters={"action_key": "action_value"}),
        )
        assert reply.text == "Button clicked! (Action: onCardClick)"

    def test_update_original_message(self, dispatcher):
        reply = plan(dispatcher, card_click_event(c.ACTION_UPDATE_MESSAGE))
        assert reply.is_update
        assert reply.update_target_message_name == MESSAGE_NAME
        assert reply.update_field_mask == {"text", "cards_v2"}
        assert reply.text == c.MESSAGE_UPDATED_TEXT

    def test_update_without_message_name_falls_back_to_text(self, dispatcher):
        reply = plan(dispatcher, card_click_event(c.ACTION_UPDATE_MESSAGE, message_name=None))
        assert not reply.is_update
        assert reply.text == c.UPDATE_FAILED_TEXT

    @pytest.mark.parametrize(
        "form_inputs,expected",
        [
            ({"selection": ["a", "b"]}, "You selected: a, b"),
            ({"selection": []}, "You selected: None"),
            ({"other": ["z"]}, "You selected: None"),
            (None, "You selected: None"),
        ],
    )
    def test_submit_selection(self, dispatcher, form_inputs, expected):
        reply = plan(
            dispatcher, card_click_event(c.ACTION_SUBMIT_SELECTION, form_inputs=form_inputs)
        )
        assert reply.text == expected

    def test_accessory_click(self, dispatcher):
        reply = plan(
            dispatcher, card_click_event(c.ACTION_ACCESSORY_CLICK, parameters={"item": "beta"})
        )
        assert reply.text == "Accessory button clicked for beta"

    def test_accessory_click_without_item(self, dispatcher):
        reply = plan(dispatcher, card_click_event(c.ACTION_ACCESSORY_CLICK))
        assert reply.text == "Accessory button clicked for unknown"

    def test_unmatched_action_is_echoed(self, dispatcher):
        reply = plan(dispatcher, card_click_event("doSomethingElse"))
        assert reply.text == "Unknown card action: doSomethingElse"

    def test_unresolved_action_echoes_placeholder(self, dispatcher):
        reply = plan(dispatcher, legacy_event("CARD_CLICKED", message={"name": MESSAGE_NAME}))
        assert reply.text == "Unknown card action: unknown"

    def test_click_on_app_sent_card_is_answered(self, dispatcher):
        tree = card_click_event(c.ACTION_CARD_CLICK)
        assert tree["chat"]["buttonClickedPayload"]["message"]["sender"]["type"] == "BOT"
        reply = plan(dispatcher, tree)
        assert reply is not None
        assert reply.text == "Button clicked! (Action: onCardClick)"

    def test_legacy_click_on_app_sent_card_is_answered(self, dispatcher):
        tree = legacy_event(
            "CARD_CLICKED",
            action={"actionMethodName": c.ACTION_CARD_CLICK},
            message={"name": MESSAGE_NAME, "sender": {"displayName": "Relay", "type": "BOT"}},
        )
        reply = plan(dispatcher, tree)
        assert reply is not None
        assert reply.text == "Button clicked! (Action: onCardClick)"

    def test_click_by_bot_user_is_suppressed(self, dispatcher):
        tree = card_click_event(c.ACTION_CARD_CLICK)
        tree["chat"]["user"]["type"] = "BOT"
        assert plan(dispatcher, tree) is None

    @pytest.mark.parametrize("key", c.ACTION_PARAMETER_KEYS)
    def test_action_named_by_parameter(self, dispatcher, key):
        reply = plan(
            dispatcher,
            card_click_event("handleAction", parameters={key: c.ACTION_ACCESSORY_CLICK, "item": "x"}),
        )
        assert reply.text == "Accessory button clicked for x"

    def test_invoked_function_takes_precedence_over_parameters(self):
        event = ChatEvent(
            kind=EventKind.CARD_CLICK,
            space_name=SPACE,
            action_id=c.ACTION_CARD_CLICK,
            parameters={"action": c.ACTION_SUBMIT_SELECTION},
        )
        assert resolve_card_action(event) == c.ACTION_CARD_CLICK


class TestAddedToSpace:
    def test_welcome(self, dispatcher):
        reply = plan(dispatcher, added_to_space_event())
        assert reply.text == c.WELCOME_TEXT
        assert reply.thread is None
        assert reply.parent == SPACE


def test_unknown_kind_is_dropped(dispatcher):
    assert dispatcher.plan_reply(ChatEvent(kind=EventKind.UNKNOWN, space_name=SPACE)) is None


def test_bot_suppression_applies_to_every_kind(dispatcher):
    event = ChatEvent(
        kind=EventKind.APP_COMMAND,
        space_name=SPACE,
        command_id=1,
        sender=Sender(display_name="bot", sender_type=SenderType.BOT),
    )
    assert dispatcher.plan_reply(event) is None


def test_card_round_trip_recovers_click_branch(dispatcher):
    """A button on a sent card, clicked, routes back to the handler it names."""
    card_reply = plan(dispatcher, app_command_event(c.CMD_CREATE_CARD))
    button = card_reply.card.widgets[0].buttons[0]
    click = classify(
        card_click_event(button.action.function_id, parameters=button.action.parameters)
    )
    assert click.kind == EventKind.CARD_CLICK
    assert click.parameters == button.action.parameters
    assert resolve_card_action(click) == c.ACTION_CARD_CLICK
    assert dispatcher.plan_reply(click).text == "Button clicked! (Action: onCardClick)"


def test_accessory_card_round_trip(dispatcher):
    card_reply = plan(dispatcher, app_command_event(c.CMD_ACCESSORY_CARD))
    button = card_reply.card.widgets[1].button
    click = classify(
        card_click_event(button.action.function_id, parameters=button.action.parameters)
    )
    assert dispatcher.plan_reply(click).text == "Accessory button clicked for beta"
