"""Task factory - builds new tasks from a name and an optional pipeline."""

import itertools
from collections.abc import Callable, Sequence
from datetime import datetime

from loguru import logger

from opsboard.core.models import Step, Task, TaskStatus

DEFAULT_OWNER = "You"
DEFAULT_TASK_LLM = "GPT-4"
INITIAL_TASK_PROGRESS = 5.0
DEFAULT_ID_START = 1000

DEFAULT_PIPELINE: tuple[Step, ...] = (
    Step(name="Ingest Requirements", status=TaskStatus.RUNNING, llm="GPT-4", progress=15),
    Step(name="Spec Synthesis", status=TaskStatus.QUEUED, llm="Claude Sonnet 4.5"),
    Step(name="Ops Plan + Checks", status=TaskStatus.QUEUED, llm="Kimi K2"),
    Step(name="Execution & Verify", status=TaskStatus.QUEUED, llm="GPT-4"),
)


class IdGenerator:
    """
    Monotonic task id source.

    Ids start right after ``start`` and are never reused for the lifetime of
    the generator.

    Example:
        >>> ids = IdGenerator(start=1000)
        >>> ids.next(), ids.next()
        (1001, 1002)
    """

    def __init__(self, start: int = DEFAULT_ID_START) -> None:
        self.start = start
        self._counter = itertools.count(start + 1)
        self.last: int | None = None

    def next(self) -> int:
        self.last = next(self._counter)
        return self.last

    def __call__(self) -> int:
        return self.next()

    def reset(self, start: int | None = None) -> None:
        """Restart the sequence (tests only; a live board must never reuse ids)."""
        if start is not None:
            self.start = start
        self._counter = itertools.count(self.start + 1)
        self.last = None


# Process-wide generator used when a factory is built without one
default_id_generator = IdGenerator()


class TaskFactory:
    """
    Construct new running tasks.

    The caller is responsible for rejecting blank names before calling
    ``create``.

    Example:
        >>> factory = TaskFactory()
        >>> task = factory.create("Audit Logs")
        >>> task.status, task.progress, task.llm
        (<TaskStatus.RUNNING: 'running'>, 5.0, 'GPT-4')
    """

    def __init__(
        self,
        id_generator: IdGenerator | None = None,
        clock: Callable[[], datetime] | None = None,
        default_owner: str = DEFAULT_OWNER,
        default_llm: str = DEFAULT_TASK_LLM,
        default_pipeline: Sequence[Step] = DEFAULT_PIPELINE,
    ) -> None:
        """Initialize the factory.

        Args:
            id_generator: Id source. Uses the process-wide generator if not provided.
            clock: Callable returning the creation time. Defaults to ``datetime.now``.
            default_owner: Owner for tasks created without one.
            default_llm: Task label when no step is running.
            default_pipeline: Steps used when ``create`` gets none.
        """
        self.id_generator = id_generator or default_id_generator
        self.clock = clock or datetime.now
        self.default_owner = default_owner
        self.default_llm = default_llm
        self.default_pipeline = tuple(default_pipeline)

    def create(
        self,
        name: str,
        owner: str | None = None,
        steps: Sequence[Step] | None = None,
    ) -> Task:
        """
        Create a new running task.

        Args:
            name: Display name (non-empty).
            owner: Owning user. Defaults to the factory's default owner.
            steps: Explicit pipeline. The default pipeline is used when ``None``.

        Returns:
            The new task with its own copies of the steps.
        """
        pipeline = self.default_pipeline if steps is None else steps
        owned_steps = [step.model_copy(deep=True) for step in pipeline]

        task = Task(
            id=self.id_generator.next(),
            name=name,
            user=owner or self.default_owner,
            status=TaskStatus.RUNNING,
            progress=INITIAL_TASK_PROGRESS,
            llm=self._primary_llm(owned_steps),
            start_time=self.clock(),
            duration="0s",
            steps=owned_steps,
        )
        logger.info(f"Created task {task.id} '{task.name}' for {task.user} with {len(owned_steps)} step(s)")
        return task

    def _primary_llm(self, steps: Sequence[Step]) -> str:
        """Label of the first running step, else the default."""
        for step in steps:
            if step.status == TaskStatus.RUNNING:
                return step.llm
        return self.default_llm


def make_task(name: str, owner: str | None = None, steps: Sequence[Step] | None = None) -> Task:
    """Create a task with a default factory and the process-wide id counter."""
    return TaskFactory().create(name, owner=owner, steps=steps)
