"""Core module - task models, the task board, configuration and errors."""

from opsboard.core.config import Settings, clear_settings_cache, get_settings
from opsboard.core.exceptions import (
    DuplicateTaskError,
    EmptyMessageError,
    EmptyTaskNameError,
    OpsBoardError,
    TaskNotFoundError,
)
from opsboard.core.models import (
    BoardStats,
    BoardView,
    Message,
    MessageRole,
    Step,
    Task,
    TaskStatus,
)
from opsboard.core.board import TaskBoard

__all__ = [
    "BoardStats",
    "BoardView",
    "DuplicateTaskError",
    "EmptyMessageError",
    "EmptyTaskNameError",
    "Message",
    "MessageRole",
    "OpsBoardError",
    "Settings",
    "Step",
    "Task",
    "TaskBoard",
    "TaskNotFoundError",
    "TaskStatus",
    "clear_settings_cache",
    "get_settings",
]
