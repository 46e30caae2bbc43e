"""Error taxonomy carried inside ``Result.error``.

Store adapters and the task service return these as values; they are raised
only inside a single call and caught at the boundary.
"""


class RunTasksError(Exception):
    """Base exception for all task tracker errors."""


class ConfigurationError(RunTasksError):
    """The task store has no usable endpoint."""


class TaskStoreError(RunTasksError):
    """A read or write against the task store failed."""

    def __init__(self, operation: str, cause: BaseException | None = None):
        self.operation = operation
        self.cause = cause
        message = f"{operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ValidationError(RunTasksError):
    """Input rejected before any I/O."""


class TaskNotFoundError(RunTasksError):
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class NotAuthenticatedError(RunTasksError):
    def __init__(self) -> None:
        super().__init__("No authenticated user")
