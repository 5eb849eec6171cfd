"""
Command to send a planned reply through the chat client.

The only place an outbound call happens. Failures are logged with the target
space and swallowed; nothing is retried.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from app.adapters.base import ChatClient
from app.config import Settings, get_settings
from app.core.json_tree import get_str
from app.core.replies import render_message
from app.schemas.reply import ReplyRequest, SentMessageRef

logger = logging.getLogger(__name__)


class SendReplyCommand:
    """Render a ReplyRequest and issue a create or update call."""

    def __init__(
        self, chat_client: Optional[ChatClient], settings: Optional[Settings] = None
    ) -> None:
        self.chat_client = chat_client
        self.settings = settings or get_settings()

    async def execute(self, reply: ReplyRequest) -> Optional[SentMessageRef]:
        """
        Send the reply.

        Returns:
            SentMessageRef for the created/updated message, or None if the
            client is unavailable or the call failed.
        """
        if self.chat_client is None:
            logger.error("ChatServiceClient not initialized; cannot reply to %s", reply.parent)
            return None

        message = render_message(reply)
        if reply.is_update:
            logger.info(
                "Attempting to update message %s in %s", reply.update_target_message_name, reply.parent
            )
        else:
            logger.info(
                "Attempting to send reply to %s (thread: %s): %s",
                reply.parent,
                reply.thread,
                reply.text if reply.card is None else f"card {reply.card.id}",
            )
        if self.settings.log_outgoing_messages:
            logger.debug("Outgoing message JSON: %s", json.dumps(message, indent=2))

        try:
            if reply.is_update:
                response = await self.chat_client.update_message(
                    message, sorted(reply.update_field_mask)
                )
            else:
                response = await self.chat_client.create_message(reply.parent, message)
        except Exception:
            logger.exception("Failed to send reply to %s", reply.parent)
            return None

        sent = SentMessageRef(
            name=get_str(response, "name"),
            space_name=reply.parent,
            thread_name=get_str(response, "thread", "name") or reply.thread,
        )
        logger.info("Sent reply to %s, response ID: %s", reply.parent, sent.name)
        return sent
