"""Webhook command handlers."""

from app.commands.webhooks.chat_event_command import ChatEventWebhookCommand

__all__ = ["ChatEventWebhookCommand"]
