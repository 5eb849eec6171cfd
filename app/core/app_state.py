"""
Process-scoped state.

The chat client is created once at startup and shared, read-only, by every
request. ``start``/``stop`` are driven by the FastAPI lifespan.
"""

from __future__ import annotations

from typing import Optional

from google.auth.exceptions import GoogleAuthError

from app.adapters.base import ChatClient
from app.adapters.google_chat import GoogleChatClient
from app.config import Settings
from app.infra.logging_config import get_logger

logger = get_logger("app_state")


class AppState:
    def __init__(self) -> None:
        self.chat_client: Optional[ChatClient] = None

    async def start(self, settings: Settings) -> None:
        if not settings.google_chat_enabled:
            logger.warning("Google Chat is disabled; replies will not be sent.")
            return
        try:
            self.chat_client = GoogleChatClient.from_settings(settings)
        except GoogleAuthError:
            if settings.chat_client_fail_fast:
                logger.exception("Failed to initialize ChatServiceClient")
                raise
            logger.exception(
                "Failed to initialize ChatServiceClient; continuing without a chat client"
            )
            self.chat_client = None

    async def stop(self) -> None:
        if self.chat_client is None:
            return
        client, self.chat_client = self.chat_client, None
        await client.close()
        logger.info("ChatServiceClient closed.")


state = AppState()
