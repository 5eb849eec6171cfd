"""Chat platform clients."""

from app.adapters.base import ChatClient

__all__ = ["ChatClient"]
