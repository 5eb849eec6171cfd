"""
Chat client interface.

The dispatcher never talks to the chat platform directly; it goes through this
capability. Messages are REST-shaped dicts (``text``, ``thread``, ``cardsV2``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable


class ChatClient(ABC):
    """Contract for the outbound chat API. Implementations must be safe for concurrent use."""

    @abstractmethod
    async def create_message(self, parent: str, message: dict[str, Any]) -> dict[str, Any]:
        """Create ``message`` in space ``parent``. Return the created message (with ``name``)."""
        ...

    @abstractmethod
    async def update_message(
        self, message: dict[str, Any], update_mask: Iterable[str]
    ) -> dict[str, Any]:
        """Update the fields in ``update_mask`` of the message named ``message["name"]``."""
        ...

    async def close(self) -> None:
        """Release transport resources. Override if the client holds any."""
        return None
