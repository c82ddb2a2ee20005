"""Task board - the collection of tasks shown on the dashboard.

The board owns every task by id, lists them newest-first, and is the
single place where simulation ticks are applied.
"""

from collections.abc import Sequence
from datetime import datetime, timedelta

from loguru import logger

from opsboard.core.config import Settings
from opsboard.core.exceptions import DuplicateTaskError, EmptyTaskNameError, TaskNotFoundError
from opsboard.core.models import BoardStats, BoardView, Step, Task, TaskStatus
from opsboard.pipeline.factory import IdGenerator, TaskFactory
from opsboard.simulation.engine import ProgressSimulator

DEMO_TASK_IDS = (1, 2, 3)


class TaskBoard:
    """
    In-memory task collection driven by the progress simulator.

    Example:
        >>> board = TaskBoard()
        >>> task = board.create_task("Audit Logs")
        >>> snapshot = board.tick()
        >>> board.stats().running
        1
    """

    def __init__(
        self,
        factory: TaskFactory | None = None,
        simulator: ProgressSimulator | None = None,
        current_user: str | None = None,
    ) -> None:
        """Initialize the board.

        Args:
            factory: Task factory. A default factory is used if not provided.
            simulator: Progress simulator. A default simulator is used if not provided.
            current_user: User for the individual view. Defaults to the factory's owner.
        """
        self.factory = factory or TaskFactory()
        self.simulator = simulator or ProgressSimulator(clock=self.factory.clock)
        self.current_user = current_user or self.factory.default_owner
        self._tasks: dict[int, Task] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "TaskBoard":
        """Build a board configured from application settings."""
        id_start = settings.id_start
        if settings.seed_demo_tasks and id_start < max(DEMO_TASK_IDS):
            logger.warning(f"id_start {id_start} overlaps demo task ids, starting after {max(DEMO_TASK_IDS)}")
            id_start = max(DEMO_TASK_IDS)

        factory = TaskFactory(
            id_generator=IdGenerator(start=id_start),
            default_owner=settings.current_user,
            default_llm=settings.default_llm,
        )
        board = cls(factory=factory, current_user=settings.current_user)
        if settings.seed_demo_tasks:
            board.seed_demo_tasks()
        return board

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    # =========================================================================
    # MUTATION
    # =========================================================================

    def create_task(
        self,
        name: str,
        owner: str | None = None,
        steps: Sequence[Step] | None = None,
    ) -> Task:
        """
        Create a task and add it to the board.

        Args:
            name: Display name. Surrounding whitespace is removed.
            owner: Owning user.
            steps: Explicit pipeline, or ``None`` for the default one.

        Returns:
            The created task.

        Raises:
            EmptyTaskNameError: If the name is blank.
            DuplicateTaskError: If the factory issues an id already on the board.
        """
        name = (name or "").strip()
        if not name:
            raise EmptyTaskNameError("Task name must not be blank")

        task = self.factory.create(name, owner=owner or self.current_user, steps=steps)
        self.add(task)
        return task

    def add(self, task: Task) -> None:
        """
        Add a task by id.

        Raises:
            DuplicateTaskError: If a task with the same id is already on the board.
        """
        if task.id in self:
            raise DuplicateTaskError(task.id)
        self._tasks[task.id] = task

    def remove(self, task_id: int) -> Task:
        """
        Remove a task.

        Raises:
            TaskNotFoundError: If no task has this id.
        """
        try:
            task = self._tasks.pop(task_id)
        except KeyError:
            raise TaskNotFoundError(task_id) from None
        logger.info(f"Removed task {task_id} '{task.name}'")
        return task

    def tick(self) -> list[Task]:
        """
        Advance every running task once.

        Returns:
            The new snapshot, newest first.
        """
        advanced = self.simulator.tick(list(self._tasks.values()))
        for task in advanced:
            # Tasks removed while the tick was computed stay removed
            if task.id in self:
                self._tasks[task.id] = task
        return self.list_tasks()

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get(self, task_id: int) -> Task:
        """
        Get a task by id.

        Raises:
            TaskNotFoundError: If no task has this id.
        """
        try:
            return self._tasks[task_id]
        except KeyError:
            raise TaskNotFoundError(task_id) from None

    def list_tasks(
        self,
        view: BoardView = BoardView.TEAM,
        user: str | None = None,
    ) -> list[Task]:
        """
        List tasks newest-first.

        Args:
            view: ``team`` for everything, ``individual`` for one user's tasks.
            user: User for the individual view. Defaults to the current user.

        Returns:
            Tasks ordered by descending id.
        """
        tasks = sorted(self._tasks.values(), key=lambda t: t.id, reverse=True)
        if view == BoardView.INDIVIDUAL:
            owner = user or self.current_user
            tasks = [t for t in tasks if t.user == owner]
        return tasks

    def stats(self, view: BoardView = BoardView.TEAM, user: str | None = None) -> BoardStats:
        """Count tasks by status within a view."""
        tasks = self.list_tasks(view, user)
        return BoardStats(
            total=len(tasks),
            running=sum(1 for t in tasks if t.status == TaskStatus.RUNNING),
            queued=sum(1 for t in tasks if t.status == TaskStatus.QUEUED),
            complete=sum(1 for t in tasks if t.status == TaskStatus.COMPLETE),
        )

    # =========================================================================
    # DEMO DATA
    # =========================================================================

    def seed_demo_tasks(self, now: datetime | None = None) -> list[Task]:
        """
        Populate the board with the three demo tasks.

        Args:
            now: Reference time for the demo start times.

        Returns:
            The seeded tasks.
        """
        now = now or self.factory.clock()

        def ago(minutes: int) -> datetime:
            return now - timedelta(minutes=minutes)

        tasks = [
            Task(
                id=DEMO_TASK_IDS[0],
                name="Reconcile Q3 Invoices",
                user=self.current_user,
                status=TaskStatus.RUNNING,
                progress=42,
                llm="GPT-4",
                start_time=ago(5),
                duration="5m 0s",
                steps=[
                    Step(name="Parse PDFs", status=TaskStatus.COMPLETE, llm="GPT-4", progress=100, duration="2m 10s"),
                    Step(
                        name="Vendor Matching",
                        status=TaskStatus.RUNNING,
                        llm="Claude Sonnet 4.5",
                        progress=35,
                        duration="1m 10s",
                    ),
                    Step(name="Anomaly Check", llm="Kimi K2"),
                    Step(name="Ledger Update", llm="GPT-4"),
                ],
            ),
            Task(
                id=DEMO_TASK_IDS[1],
                name="Procurement: Monitor RFP replies",
                user="Ava",
                status=TaskStatus.QUEUED,
                progress=0,
                llm="Claude Sonnet 4.5",
                start_time=ago(1),
                steps=[
                    Step(name="Collect Emails", llm="Kimi K2"),
                    Step(name="Summarize Replies", llm="GPT-4"),
                    Step(name="Score Vendors", llm="Claude Sonnet 4.5"),
                ],
            ),
            Task(
                id=DEMO_TASK_IDS[2],
                name="IT: Access Review Batch",
                user="Ben",
                status=TaskStatus.COMPLETE,
                progress=100,
                llm="Kimi K2",
                start_time=ago(45),
                duration="12m 14s",
                steps=[
                    Step(name="Export Accounts", status=TaskStatus.COMPLETE, llm="GPT-4", progress=100, duration="3m 00s"),
                    Step(name="Policy Diff", status=TaskStatus.COMPLETE, llm="Claude Sonnet 4.5", progress=100, duration="4m 40s"),
                    Step(name="Notify Owners", status=TaskStatus.COMPLETE, llm="Kimi K2", progress=100, duration="4m 34s"),
                ],
            ),
        ]
        for task in tasks:
            self.add(task)
        logger.debug(f"Seeded {len(tasks)} demo task(s)")
        return tasks
