"""
Push endpoint for chat events.

The message queue POSTs push deliveries here. The response is always an empty
200: any other status makes the transport redeliver, and a delivery we could
not process once will not succeed on redelivery either.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from app.adapters.base import ChatClient
from app.commands.webhooks.chat_event_command import ChatEventWebhookCommand
from app.routers.utils.dependencies import get_chat_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post("/", status_code=200, response_class=Response)
async def receive_push(
    request: Request,
    chat_client: Optional[ChatClient] = Depends(get_chat_client),
) -> Response:
    """Receive a push delivery, process it, and acknowledge with an empty 200."""
    body = await request.body()
    state = await ChatEventWebhookCommand(chat_client).execute(body)
    logger.debug("Push delivery finished in state %s", state.value)
    return Response(status_code=200)
