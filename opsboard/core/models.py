"""Pydantic models for ops tasks, their pipeline steps and chat messages.

Tasks and steps are frozen: after creation the simulation engine is the only
component that changes them, and it does so by building new instances with
``model_copy(update=...)`` rather than mutating in place.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

PROGRESS_MIN = 0.0
PROGRESS_MAX = 100.0


# =============================================================================
# ENUMS
# =============================================================================


class TaskStatus(str, Enum):
    """Lifecycle status shared by tasks and their steps."""

    QUEUED = "queued"
    RUNNING = "running"
    COMPLETE = "complete"


class MessageRole(str, Enum):
    """Author of a chat message."""

    USER = "user"
    AI = "ai"


class BoardView(str, Enum):
    """Which tasks a board listing includes."""

    TEAM = "team"
    INDIVIDUAL = "individual"


# =============================================================================
# TASKS
# =============================================================================


class Step(BaseModel):
    """One stage of a task's pipeline, attributed to a worker model.

    ``progress`` and ``duration`` stay ``None`` until the step starts running.

    Example:
        >>> step = Step(name="Parse PDFs", status=TaskStatus.RUNNING, llm="GPT-4", progress=15)
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Stage name")
    status: TaskStatus = Field(default=TaskStatus.QUEUED, description="Stage status")
    llm: str = Field(..., description="Worker-model label assigned to the stage")
    progress: float | None = Field(
        default=None,
        ge=PROGRESS_MIN,
        le=PROGRESS_MAX,
        description="Percent complete, unset while queued",
    )
    duration: str | None = Field(
        default=None,
        description="Elapsed time since the owning task started, set once running",
    )

    @property
    def is_complete(self) -> bool:
        return self.status == TaskStatus.COMPLETE


class Task(BaseModel):
    """A user-visible unit of ops work composed of ordered steps.

    Two tasks are equal when they share an id, regardless of how far the
    simulation has advanced either snapshot.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Unique, monotonically assigned identifier")
    name: str = Field(..., min_length=1, description="Display name")
    user: str = Field(..., description="Owning user")
    status: TaskStatus = Field(default=TaskStatus.RUNNING)
    progress: float = Field(default=0.0, ge=PROGRESS_MIN, le=PROGRESS_MAX)
    llm: str = Field(..., description="Worker-model label currently most active")
    start_time: datetime = Field(..., description="When the task was created/started")
    duration: str | None = Field(default=None, description="Human-readable elapsed time")
    steps: list[Step] = Field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def is_running(self) -> bool:
        return self.status == TaskStatus.RUNNING

    @property
    def is_complete(self) -> bool:
        return self.status == TaskStatus.COMPLETE

    def all_steps_complete(self) -> bool:
        """Check whether every step has finished (vacuously true with no steps)."""
        return all(step.is_complete for step in self.steps)


# =============================================================================
# CHAT
# =============================================================================


class Message(BaseModel):
    """Single chat message."""

    model_config = ConfigDict(frozen=True)

    role: MessageRole
    text: str
    timestamp: datetime = Field(default_factory=datetime.now)


class BoardStats(BaseModel):
    """Task counts for a board view."""

    total: int = 0
    running: int = 0
    queued: int = 0
    complete: int = 0
