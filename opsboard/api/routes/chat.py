"""
Chat API Routes.

Drive the planning conversation and turn its latest plan into a task.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from opsboard.api.dependencies import get_board, get_chat
from opsboard.api.websocket import ws_manager
from opsboard.chat.session import ChatSession
from opsboard.core.board import TaskBoard
from opsboard.core.exceptions import EmptyMessageError
from opsboard.core.models import Message, Step, Task

router = APIRouter()


class SendMessageRequest(BaseModel):
    """A user chat message."""

    text: str = Field(..., description="Message text")


class CreateFromChatRequest(BaseModel):
    """Optional owner override for chat-derived tasks."""

    user: str | None = None


@router.get("/messages", response_model=list[Message])
async def list_messages(chat: ChatSession = Depends(get_chat)) -> list[Message]:
    """Get the transcript, oldest first."""
    return chat.messages


@router.post("/messages", response_model=Message)
async def send_message(
    request: SendMessageRequest,
    chat: ChatSession = Depends(get_chat),
) -> Message:
    """
    Send a user message and wait for the planner's reply.

    Returns:
        The AI reply.

    Raises:
        HTTPException: If the message is blank.
    """
    try:
        return await chat.send(request.text)
    except EmptyMessageError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.get("/pipeline", response_model=list[Step] | None)
async def get_pipeline(chat: ChatSession = Depends(get_chat)) -> list[Step] | None:
    """Preview the pipeline derived from the latest plan, or null."""
    return chat.derive_pipeline()


@router.post("/tasks", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task_from_chat(
    request: CreateFromChatRequest | None = None,
    chat: ChatSession = Depends(get_chat),
    board: TaskBoard = Depends(get_board),
) -> Task:
    """Create a task named after the conversation using its latest plan."""
    owner = request.user if request else None
    task = chat.create_task(board, owner=owner)
    await ws_manager.notify_task_created(task)
    return task


@router.post("/reset", response_model=list[Message])
async def reset_chat(chat: ChatSession = Depends(get_chat)) -> list[Message]:
    """Start the conversation over."""
    chat.reset()
    return chat.messages
