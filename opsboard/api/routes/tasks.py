"""
Tasks API Routes.

List, inspect, create and remove tasks on the board.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from opsboard.api.dependencies import get_board
from opsboard.api.websocket import ws_manager
from opsboard.core.board import TaskBoard
from opsboard.core.exceptions import DuplicateTaskError, EmptyTaskNameError, TaskNotFoundError
from opsboard.core.models import BoardStats, BoardView, Task

router = APIRouter()


# ============================================================================
# Request Models
# ============================================================================


class CreateTaskRequest(BaseModel):
    """Direct task creation with the default pipeline."""

    name: str = Field(..., description="Task name")
    user: str | None = Field(default=None, description="Owner, defaults to the current user")


# ============================================================================
# Routes
# ============================================================================


@router.get("/", response_model=list[Task])
async def list_tasks(
    view: BoardView = Query(BoardView.TEAM, description="team or individual"),
    user: str | None = Query(None, description="User for the individual view"),
    board: TaskBoard = Depends(get_board),
) -> list[Task]:
    """
    List tasks newest-first.

    Args:
        view: Which tasks to include.
        user: Owner filter for the individual view.

    Returns:
        List of tasks.
    """
    return board.list_tasks(view, user)


@router.get("/stats", response_model=BoardStats)
async def get_stats(
    view: BoardView = Query(BoardView.TEAM),
    user: str | None = Query(None),
    board: TaskBoard = Depends(get_board),
) -> BoardStats:
    """Count tasks by status for a view."""
    return board.stats(view, user)


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: int, board: TaskBoard = Depends(get_board)) -> Task:
    """
    Get a single task with its steps.

    Args:
        task_id: Task id.

    Returns:
        The task.

    Raises:
        HTTPException: If the task doesn't exist.
    """
    try:
        return board.get(task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.post("/", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    request: CreateTaskRequest,
    board: TaskBoard = Depends(get_board),
) -> Task:
    """
    Create a task with the default pipeline.

    Raises:
        HTTPException: If the name is blank or the issued id is taken.
    """
    try:
        task = board.create_task(request.name, owner=request.user)
    except EmptyTaskNameError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except DuplicateTaskError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    await ws_manager.notify_task_created(task)
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int, board: TaskBoard = Depends(get_board)) -> None:
    """
    Remove a task from the board.

    Raises:
        HTTPException: If the task doesn't exist.
    """
    try:
        board.remove(task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    await ws_manager.notify_task_removed(task_id)
