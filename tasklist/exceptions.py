"""Error taxonomy for the task list service."""


class TaskListError(Exception):
    """Base class for errors raised by the task store."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TaskListError):
    """Raised when input is malformed or out of range."""


class NotFoundError(TaskListError):
    """Raised when a task id does not exist."""

    def __init__(self, task_id: int):
        super().__init__("Item not found")
        self.task_id = task_id


class InternalError(TaskListError):
    """Raised for unexpected failures; the message is safe to show to clients."""
