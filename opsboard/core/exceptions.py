"""Exception hierarchy for the ops board."""


class OpsBoardError(Exception):
    """Base exception for ops board errors."""

    pass


class EmptyTaskNameError(OpsBoardError):
    """Task creation was attempted with a blank name."""

    pass


class EmptyMessageError(OpsBoardError):
    """A blank chat message was sent."""

    pass


class TaskNotFoundError(OpsBoardError):
    """No task with the requested id exists on the board."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class DuplicateTaskError(OpsBoardError):
    """A task with the same id is already on the board."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} already exists")
        self.task_id = task_id
