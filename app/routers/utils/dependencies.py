from typing import Optional

from app.adapters.base import ChatClient
from app.core.app_state import state


def get_chat_client() -> Optional[ChatClient]:
    """FastAPI dependency returning the process-scoped chat client (None when degraded)."""
    return state.chat_client
