"""
Planning chat session.

Holds the transcript for the "discuss with AI" flow: each user message gets
one canned planner reply after a short simulated delay, and the latest plan
can be turned into a task on the board.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from loguru import logger

from opsboard.core.exceptions import EmptyMessageError
from opsboard.core.models import Message, MessageRole, Step, Task
from opsboard.pipeline.deriver import DEFAULT_STEP_LLM, derive_pipeline
from opsboard.pipeline.planner import GREETING, plan_reply

if TYPE_CHECKING:
    from opsboard.core.board import TaskBoard

SUMMARY_MAX_LENGTH = 60
FALLBACK_TASK_NAME = "New Orchestrated Task"


class ChatSession:
    """
    Append-only planning conversation.

    Usage:
        chat = ChatSession(reply_delay=0.5)
        reply = await chat.send("Rotate the staging API keys")
        task = chat.create_task(board)

    Attributes:
        messages: Transcript, oldest first.
        reply_delay: Seconds to wait before appending each reply.
    """

    def __init__(self, reply_delay: float = 0.5, default_llm: str = DEFAULT_STEP_LLM) -> None:
        """
        Initialize ChatSession.

        Args:
            reply_delay: Simulated planner latency in seconds.
            default_llm: Label for plan lines without one.
        """
        self.reply_delay = reply_delay
        self.default_llm = default_llm
        self.messages: list[Message] = []
        self._reply_lock = asyncio.Lock()
        self.reset()

    async def send(self, text: str) -> Message:
        """
        Append a user message and, after the reply delay, the planner's reply.

        Replies are serialised, so concurrent sends get their replies in the
        order the user messages were appended.

        Args:
            text: User message.

        Returns:
            The appended AI reply.

        Raises:
            EmptyMessageError: If the message is blank.
        """
        text = (text or "").strip()
        if not text:
            raise EmptyMessageError("Chat message must not be blank")

        self._append(MessageRole.USER, text)

        async with self._reply_lock:
            if self.reply_delay:
                await asyncio.sleep(self.reply_delay)
            return self._append(MessageRole.AI, plan_reply(text))

    def summarize(self) -> str:
        """Name a task after the latest user message."""
        for message in reversed(self.messages):
            if message.role == MessageRole.USER:
                return message.text[:SUMMARY_MAX_LENGTH]
        return FALLBACK_TASK_NAME

    def derive_pipeline(self) -> list[Step] | None:
        """Steps from the latest plan in the transcript, or ``None``."""
        return derive_pipeline(self.messages, default_llm=self.default_llm)

    def create_task(self, board: TaskBoard, owner: str | None = None) -> Task:
        """
        Create a task on the board from this conversation.

        Falls back to the board's default pipeline when no usable plan exists.

        Args:
            board: Board that will own the task.
            owner: Owning user.

        Returns:
            The created task.
        """
        steps = self.derive_pipeline()
        if not steps:
            logger.info("No usable plan in chat, using default pipeline")
            steps = None
        return board.create_task(self.summarize(), owner=owner, steps=steps)

    def reset(self) -> None:
        """Clear the transcript back to the greeting."""
        self.messages = [Message(role=MessageRole.AI, text=GREETING)]

    def _append(self, role: MessageRole, text: str) -> Message:
        message = Message(role=role, text=text)
        self.messages.append(message)
        logger.debug(f"Chat {role.value}: {text[:80]}")
        return message
