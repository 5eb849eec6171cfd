"""Tests for the push delivery pipeline."""

import json
from unittest.mock import MagicMock, patch

import pytest

from app.commands.webhooks.chat_event_command import ChatEventWebhookCommand
from app.constants import chat as c
from app.schemas.chat_event import DeliveryState
from tests.fixtures.chat_event_fixtures import (
    SPACE,
    app_command_event,
    card_click_event,
    message_event,
    push_body,
)


@pytest.fixture
def settings():
    s = MagicMock()
    s.log_outgoing_messages = False
    return s


async def run(client, body, settings):
    return await ChatEventWebhookCommand(client, settings=settings).execute(body)


@pytest.mark.asyncio
async def test_message_is_handled(fake_chat_client, settings):
    state = await run(fake_chat_client, push_body(message_event()), settings)
    assert state == DeliveryState.HANDLED
    parent, message = fake_chat_client.created[0]
    assert parent == SPACE
    assert message["text"] == "Hello Tester, you said: Hello"


@pytest.mark.asyncio
async def test_missing_payload_sends_nothing(fake_chat_client, settings):
    body = json.dumps({"message": {"messageId": "1"}}).encode()
    state = await run(fake_chat_client, body, settings)
    assert state == DeliveryState.DROPPED
    assert fake_chat_client.send_count == 0


@pytest.mark.asyncio
async def test_bot_message_sends_nothing(fake_chat_client, settings):
    state = await run(fake_chat_client, push_body(message_event(sender_type="BOT")), settings)
    assert state == DeliveryState.DROPPED
    assert fake_chat_client.send_count == 0


@pytest.mark.asyncio
async def test_unresolved_space_sends_nothing(fake_chat_client, settings):
    state = await run(fake_chat_client, push_body(message_event(space=None)), settings)
    assert state == DeliveryState.DROPPED
    assert fake_chat_client.send_count == 0


@pytest.mark.asyncio
async def test_unknown_command_still_replies(fake_chat_client, settings):
    state = await run(fake_chat_client, push_body(app_command_event(999)), settings)
    assert state == DeliveryState.HANDLED
    assert fake_chat_client.created[0][1]["text"] == c.UNKNOWN_COMMAND_TEXT


@pytest.mark.asyncio
async def test_update_action_issues_update_call(fake_chat_client, settings):
    body = push_body(card_click_event(c.ACTION_UPDATE_MESSAGE))
    state = await run(fake_chat_client, body, settings)
    assert state == DeliveryState.HANDLED
    assert fake_chat_client.created == []
    assert len(fake_chat_client.updated) == 1


@pytest.mark.asyncio
async def test_send_failure_still_handled(failing_chat_client, settings):
    state = await run(failing_chat_client, push_body(message_event()), settings)
    assert state == DeliveryState.HANDLED


@pytest.mark.asyncio
async def test_no_client_drops(settings):
    state = await run(None, push_body(message_event()), settings)
    assert state == DeliveryState.DROPPED


@pytest.mark.asyncio
async def test_unexpected_error_is_contained(fake_chat_client, settings):
    with patch(
        "app.commands.webhooks.chat_event_command.classify",
        side_effect=RuntimeError("boom"),
    ):
        state = await run(fake_chat_client, push_body(message_event()), settings)
    assert state == DeliveryState.DROPPED
    assert fake_chat_client.send_count == 0


@pytest.mark.asyncio
async def test_handled_delivery_passes_through_every_state(fake_chat_client, settings):
    command = ChatEventWebhookCommand(fake_chat_client, settings=settings)
    await command.execute(push_body(message_event()))
    assert command.history == [
        DeliveryState.RECEIVED,
        DeliveryState.DECODED,
        DeliveryState.CLASSIFIED,
        DeliveryState.HANDLED,
    ]


@pytest.mark.asyncio
async def test_undecodable_delivery_stops_after_received(fake_chat_client, settings):
    command = ChatEventWebhookCommand(fake_chat_client, settings=settings)
    await command.execute(b"not json")
    assert command.history == [DeliveryState.RECEIVED, DeliveryState.DROPPED]


@pytest.mark.asyncio
async def test_suppressed_event_is_dropped_after_classification(fake_chat_client, settings):
    command = ChatEventWebhookCommand(fake_chat_client, settings=settings)
    await command.execute(push_body(message_event(sender_type="BOT")))
    assert command.history[-2:] == [DeliveryState.CLASSIFIED, DeliveryState.DROPPED]


@pytest.mark.asyncio
async def test_click_on_app_sent_card_is_handled(fake_chat_client, settings):
    state = await run(fake_chat_client, push_body(card_click_event(c.ACTION_CARD_CLICK)), settings)
    assert state == DeliveryState.HANDLED
    assert fake_chat_client.created[0][1]["text"] == "Button clicked! (Action: onCardClick)"
