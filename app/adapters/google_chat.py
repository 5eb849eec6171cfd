"""
Google Chat client.

Wraps ``google.apps.chat_v1.ChatServiceAsyncClient`` authenticated with
application-default credentials scoped to the chat bot scope.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Optional

import google.auth
from google.api_core.client_options import ClientOptions
from google.api_core.exceptions import GoogleAPIError
from google.apps import chat_v1
from google.protobuf import field_mask_pb2

from app.adapters.base import ChatClient
from app.config import Settings
from app.core.errors import ChatClientError

logger = logging.getLogger(__name__)


def _to_message(message: dict[str, Any]) -> chat_v1.Message:
    return chat_v1.Message.from_json(json.dumps(message), ignore_unknown_fields=True)


def _to_dict(message: chat_v1.Message) -> dict[str, Any]:
    return json.loads(chat_v1.Message.to_json(message))


class GoogleChatClient(ChatClient):
    """ChatClient over the Google Chat API (gRPC transport)."""

    def __init__(self, client: chat_v1.ChatServiceAsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleChatClient":
        """
        Build a client from application-default credentials.

        Raises:
            google.auth.exceptions.DefaultCredentialsError: no credentials found.
        """
        logger.info(
            "Initializing ChatServiceClient with endpoint: %s and scope: %s",
            settings.chat_api_endpoint,
            settings.chat_scope,
        )
        credentials, _project = google.auth.default(scopes=[settings.chat_scope])
        client = chat_v1.ChatServiceAsyncClient(
            credentials=credentials,
            client_options=ClientOptions(api_endpoint=settings.chat_api_endpoint),
        )
        logger.info("ChatServiceClient initialized successfully.")
        return cls(client)

    async def create_message(self, parent: str, message: dict[str, Any]) -> dict[str, Any]:
        proto = _to_message(message)
        reply_option: Optional[chat_v1.CreateMessageRequest.MessageReplyOption] = None
        if proto.thread.name:
            reply_option = (
                chat_v1.CreateMessageRequest.MessageReplyOption.REPLY_MESSAGE_FALLBACK_TO_NEW_THREAD
            )
        request = chat_v1.CreateMessageRequest(parent=parent, message=proto)
        if reply_option is not None:
            request.message_reply_option = reply_option
        try:
            response = await self._client.create_message(request=request)
        except GoogleAPIError as e:
            raise ChatClientError(f"create_message failed for {parent}: {e}") from e
        return _to_dict(response)

    async def update_message(
        self, message: dict[str, Any], update_mask: Iterable[str]
    ) -> dict[str, Any]:
        request = chat_v1.UpdateMessageRequest(
            message=_to_message(message),
            update_mask=field_mask_pb2.FieldMask(paths=list(update_mask)),
        )
        try:
            response = await self._client.update_message(request=request)
        except GoogleAPIError as e:
            raise ChatClientError(
                f"update_message failed for {message.get('name')}: {e}"
            ) from e
        return _to_dict(response)

    async def close(self) -> None:
        await self._client.transport.close()
