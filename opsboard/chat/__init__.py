"""
Planning chat.

Turns a conversation with the canned planner into board tasks.
"""

from opsboard.chat.session import ChatSession

__all__ = ["ChatSession"]
