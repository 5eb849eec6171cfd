"""
Push-delivery envelope schema.

Matches the body a message-queue push subscription POSTs to the endpoint:
``{"message": {"data": "<base64>", "messageId": "...", ...}, "subscription": "..."}``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PushMessage(BaseModel):
    """The ``message`` wrapper of a push delivery."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    data: Optional[str] = None
    message_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("messageId", "message_id")
    )
    publish_time: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("publishTime", "publish_time")
    )
    attributes: dict[str, str] = Field(default_factory=dict)


class PushEnvelope(BaseModel):
    """Push-delivery envelope (root object)."""

    model_config = ConfigDict(extra="ignore")

    message: Optional[PushMessage] = None
    subscription: Optional[str] = None
