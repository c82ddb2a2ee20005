"""
Unit tests for the planning ChatSession.

Tests the transcript, reply ordering and task creation from chat.
"""

import asyncio

import pytest

from opsboard.chat.session import FALLBACK_TASK_NAME, ChatSession
from opsboard.core.exceptions import EmptyMessageError
from opsboard.core.models import MessageRole, TaskStatus
from opsboard.pipeline.planner import GREETING

# =============================================================================
# TEST FIXTURES
# =============================================================================


@pytest.fixture
def chat() -> ChatSession:
    """Create a ChatSession without reply latency."""
    return ChatSession(reply_delay=0)


# =============================================================================
# TRANSCRIPT
# =============================================================================


class TestTranscript:
    """Tests for sending messages."""

    def test_starts_with_greeting(self, chat) -> None:
        """Test a new session holds only the AI greeting."""
        assert len(chat.messages) == 1
        assert chat.messages[0].role == MessageRole.AI
        assert chat.messages[0].text == GREETING

    @pytest.mark.asyncio
    async def test_send_appends_user_and_reply(self, chat) -> None:
        """Test one reply is appended per user message."""
        reply = await chat.send("  Rotate staging keys ")

        assert [m.role for m in chat.messages] == [MessageRole.AI, MessageRole.USER, MessageRole.AI]
        assert chat.messages[1].text == "Rotate staging keys"
        assert chat.messages[-1] is reply
        assert "“Rotate staging keys”" in reply.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   "])
    async def test_blank_message_rejected(self, chat, text) -> None:
        """Test blank messages raise and leave the transcript alone."""
        with pytest.raises(EmptyMessageError):
            await chat.send(text)

        assert len(chat.messages) == 1

    @pytest.mark.asyncio
    async def test_replies_keep_conversation_order(self) -> None:
        """Test concurrent sends get replies in user-message order."""
        chat = ChatSession(reply_delay=0.01)

        await asyncio.gather(chat.send("first"), chat.send("second"), chat.send("third"))

        replies = [m.text for m in chat.messages if m.role == MessageRole.AI][1:]
        assert len(replies) == 3
        for reply, word in zip(replies, ["first", "second", "third"], strict=True):
            assert f"“{word}”" in reply

    @pytest.mark.asyncio
    async def test_reset(self, chat) -> None:
        """Test reset returns to the greeting."""
        await chat.send("something")

        chat.reset()

        assert [m.text for m in chat.messages] == [GREETING]


# =============================================================================
# SUMMARY AND DERIVATION
# =============================================================================


class TestSummarize:
    """Tests for naming tasks after the conversation."""

    def test_fallback_name(self, chat) -> None:
        """Test the fallback name without user messages."""
        assert chat.summarize() == FALLBACK_TASK_NAME

    @pytest.mark.asyncio
    async def test_latest_user_message(self, chat) -> None:
        """Test the latest user message names the task."""
        await chat.send("Old idea")
        await chat.send("Reconcile vendor invoices")

        assert chat.summarize() == "Reconcile vendor invoices"

    @pytest.mark.asyncio
    async def test_truncated_to_sixty(self, chat) -> None:
        """Test long messages are cut to 60 characters."""
        await chat.send("x" * 100)

        assert chat.summarize() == "x" * 60


class TestCreateTask:
    """Tests for ChatSession.create_task."""

    @pytest.mark.asyncio
    async def test_uses_derived_pipeline(self, chat, board) -> None:
        """Test a task is created from the latest plan."""
        await chat.send("Audit IAM roles")

        task = chat.create_task(board)

        assert task.name == "Audit IAM roles"
        assert [s.name for s in task.steps] == [
            "Ingest Inputs",
            "Plan & Branch",
            "Execute Tools",
            "Verify & Report",
        ]
        assert task.steps[0].status == TaskStatus.RUNNING
        assert task.llm == "GPT-4"
        assert board.get(task.id) is task

    def test_falls_back_to_default_pipeline(self, chat, board) -> None:
        """Test the default pipeline is used when no plan exists."""
        assert chat.derive_pipeline() is None

        task = chat.create_task(board)

        assert task.name == FALLBACK_TASK_NAME
        assert task.steps[0].name == "Ingest Requirements"

    def test_empty_plan_falls_back(self, chat, board) -> None:
        """Test an unusable plan also falls back to the default pipeline."""
        chat._append(MessageRole.AI, "1.")

        assert chat.derive_pipeline() == []
        assert len(chat.create_task(board).steps) == 4

    @pytest.mark.asyncio
    async def test_owner_override(self, chat, board) -> None:
        """Test the owner can be set explicitly."""
        await chat.send("Patch fleet")

        assert chat.create_task(board, owner="Ben").user == "Ben"
