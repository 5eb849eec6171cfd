"""
Command to handle a push-delivered chat event.

Decodes the delivery, classifies the event, plans at most one reply and sends
it. Every outcome ends in HANDLED or DROPPED; nothing is raised to the HTTP
layer, so the push transport never redelivers.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from app.adapters.base import ChatClient
from app.commands.outbound.send_reply_command import SendReplyCommand
from app.config import Settings, get_settings
from app.core.classifier import classify
from app.core.decoder import decode_delivery
from app.core.dispatcher import ChatEventDispatcher
from app.core.errors import DecodeError
from app.schemas.chat_event import DeliveryState


class ChatEventWebhookCommand:
    """
    Command to process one push delivery.
    Received → Decoded → Classified → Handled | Dropped.
    """

    def __init__(
        self,
        chat_client: Optional[ChatClient],
        dispatcher: Optional[ChatEventDispatcher] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.chat_client = chat_client
        self.settings = settings or get_settings()
        self.dispatcher = dispatcher or ChatEventDispatcher()
        self.logger = logging.getLogger(__name__)
        self.history: list[DeliveryState] = []

    async def execute(self, raw_body: Union[bytes, str]) -> DeliveryState:
        """
        Process the raw request body.

        Returns:
            DeliveryState.HANDLED when a reply call was attempted,
            DeliveryState.DROPPED otherwise.
        """
        self.logger.info("receiveMessage START (%d bytes)", len(raw_body))
        self._advance(DeliveryState.RECEIVED)
        try:
            return await self._process(raw_body)
        except Exception:
            self.logger.exception("Error processing push delivery")
            return self._advance(DeliveryState.DROPPED)
        finally:
            self.logger.info("receiveMessage END")

    def _advance(self, state: DeliveryState) -> DeliveryState:
        self.history.append(state)
        self.logger.debug("Push delivery state: %s", state.value)
        return state

    async def _process(self, raw_body: Union[bytes, str]) -> DeliveryState:
        if self.chat_client is None:
            self.logger.error("Cannot process message, ChatServiceClient is not initialized.")
            return self._advance(DeliveryState.DROPPED)

        try:
            delivery = decode_delivery(raw_body)
        except DecodeError as e:
            self.logger.warning("Dropping push delivery (%s): %s", e.reason.value, e)
            return self._advance(DeliveryState.DROPPED)
        self.logger.debug(
            "Push delivery %s from %s decoded", delivery.message_id, delivery.subscription
        )
        self._advance(DeliveryState.DECODED)

        event = classify(delivery.event)
        self._advance(DeliveryState.CLASSIFIED)
        reply = self.dispatcher.plan_reply(event)
        if reply is None:
            return self._advance(DeliveryState.DROPPED)

        await SendReplyCommand(self.chat_client, self.settings).execute(reply)
        return self._advance(DeliveryState.HANDLED)
