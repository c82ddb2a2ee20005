"""Shared board and chat instances for the API."""

from functools import lru_cache

from opsboard.chat.session import ChatSession
from opsboard.core.board import TaskBoard
from opsboard.core.config import get_settings


@lru_cache
def get_board() -> TaskBoard:
    """Get the process-wide task board."""
    return TaskBoard.from_settings(get_settings())


@lru_cache
def get_chat() -> ChatSession:
    """Get the process-wide planning chat."""
    settings = get_settings()
    return ChatSession(reply_delay=settings.reply_delay, default_llm=settings.default_llm)


def reset_state() -> None:
    """Drop the cached board and chat (useful for testing)."""
    get_board.cache_clear()
    get_chat.cache_clear()
