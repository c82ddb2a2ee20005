"""Progress simulation engine.

Advances every running task, and the running steps inside it, by a random
amount once per tick. Nothing is actually executed: progress is a numeric
simulation whose randomness and clock are injected so that a tick is a pure
``tasks -> tasks'`` transform.
"""

import math
import random
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Protocol

from loguru import logger

from opsboard.core.models import PROGRESS_MAX, PROGRESS_MIN, Step, Task, TaskStatus

TASK_INCREMENT_MAX = 6.0
STEP_INCREMENT_MAX = 10.0

# Queued steps are only considered for promotion once the task is past this
# much overall progress, and then promote when a draw exceeds the threshold.
PROMOTION_MIN_TASK_PROGRESS = 10.0
PROMOTION_DRAW_THRESHOLD = 0.7
PROMOTED_STEP_PROGRESS = 5.0


class RandomSource(Protocol):
    """Anything with a ``random()`` returning a float in [0, 1)."""

    def random(self) -> float: ...


Clock = Callable[[], datetime]


def clamp_progress(value: float) -> float:
    """Clamp a progress value into [0, 100]."""
    return max(PROGRESS_MIN, min(PROGRESS_MAX, value))


def elapsed_seconds(start: datetime, now: datetime) -> int:
    """Whole seconds between two instants, rounded half up, never negative."""
    seconds = (now - start).total_seconds()
    return max(0, math.floor(seconds + 0.5))


def format_duration(start: datetime, now: datetime) -> str:
    """Render elapsed time as ``"42s"`` or ``"3m 7s"``.

    Example:
        >>> format_duration(datetime(2025, 1, 1, 9, 0, 0), datetime(2025, 1, 1, 9, 2, 5))
        '2m 5s'
    """
    sec = elapsed_seconds(start, now)
    if sec < 60:
        return f"{sec}s"
    return f"{sec // 60}m {sec % 60}s"


class ProgressSimulator:
    """
    Advance running tasks by one simulated time step.

    Each tick, for every running task:
    1. Bump overall progress by up to 6 points
    2. Bump each running step by up to 10 points, completing it at 100
    3. Maybe promote queued steps (30% chance each, once past 10% overall)
    4. Refresh elapsed durations
    5. Complete the task when all steps are done or progress hits 100

    Queued steps are promoted independently of their position, so several
    steps of one task may be running at the same time.

    Example:
        >>> simulator = ProgressSimulator(rng=random.Random(7))
        >>> tasks = simulator.tick(tasks)
    """

    def __init__(
        self,
        rng: RandomSource | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the simulator.

        Args:
            rng: Random source. Uses a fresh ``random.Random`` if not provided.
            clock: Callable returning the current time. Defaults to ``datetime.now``.
        """
        self.rng = rng or random.Random()
        self.clock = clock or datetime.now

    def tick(self, tasks: Iterable[Task]) -> list[Task]:
        """
        Advance a whole task collection once.

        Args:
            tasks: Current snapshot of tasks.

        Returns:
            New snapshot in the same order. Tasks that are not running are
            returned as the same objects.
        """
        now = self.clock()
        snapshot = [self.advance_task(task, now) for task in tasks]
        logger.debug(f"Tick advanced {sum(1 for t in snapshot if t.is_running)} running task(s)")
        return snapshot

    def advance_task(self, task: Task, now: datetime | None = None) -> Task:
        """
        Advance a single task once.

        Args:
            task: Task to advance.
            now: Time of the tick. Read from the clock if not provided.

        Returns:
            The advanced task, or ``task`` itself if it is not running.
        """
        if task.status != TaskStatus.RUNNING:
            return task

        now = now or self.clock()
        progress = clamp_progress(task.progress + self.rng.random() * TASK_INCREMENT_MAX)
        duration = format_duration(task.start_time, now)

        steps = [self._advance_step(step, progress, duration) for step in task.steps]

        advanced = task.model_copy(update={"progress": progress, "steps": steps, "duration": duration})
        if not (advanced.all_steps_complete() or progress >= PROGRESS_MAX):
            return advanced

        logger.info(f"Task {task.id} '{task.name}' complete after {duration}")
        return advanced.model_copy(update={"progress": PROGRESS_MAX, "status": TaskStatus.COMPLETE})

    def _advance_step(self, step: Step, task_progress: float, duration: str) -> Step:
        """Advance one step given its task's already-updated progress."""
        if step.status == TaskStatus.RUNNING:
            progress = clamp_progress((step.progress or 0) + self.rng.random() * STEP_INCREMENT_MAX)
            status = TaskStatus.COMPLETE if progress >= PROGRESS_MAX else TaskStatus.RUNNING
            return step.model_copy(
                update={"progress": progress, "status": status, "duration": duration}
            )

        if (
            step.status == TaskStatus.QUEUED
            and task_progress > PROMOTION_MIN_TASK_PROGRESS
            and self.rng.random() > PROMOTION_DRAW_THRESHOLD
        ):
            return step.model_copy(
                update={
                    "status": TaskStatus.RUNNING,
                    "progress": step.progress or PROMOTED_STEP_PROGRESS,
                    "duration": duration,
                }
            )

        return step


def tick(
    tasks: Iterable[Task],
    rng: RandomSource | None = None,
    now: datetime | None = None,
) -> list[Task]:
    """Advance a task collection once with a throwaway simulator.

    Args:
        tasks: Current snapshot of tasks.
        rng: Optional random source.
        now: Optional fixed tick time.

    Returns:
        New snapshot of tasks.
    """
    clock = (lambda: now) if now is not None else None
    return ProgressSimulator(rng=rng, clock=clock).tick(tasks)
