"""Exceptions for the tasks module."""


class TasksError(Exception):
    """Base exception for all task storage errors."""

    pass


class TaskStoreError(TasksError):
    """Raised when a local store cannot read or write its data."""

    pass


class TasksAuthError(TasksError):
    """Raised when hosted-store authentication fails."""

    pass


class TasksAPIError(TasksError):
    """Raised when a hosted-store API call fails."""

    def __init__(self, message: str, status_code: int | None = None, reason: str | None = None):
        self.status_code = status_code
        self.reason = reason
        super().__init__(message)


class TaskNotFoundError(TasksError):
    """Raised when a requested task does not exist."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task '{task_id}' not found")


class RateLimitError(TasksError):
    """Raised when hosted-store rate limits are exceeded."""

    def __init__(self, retry_after: int | None = None):
        self.retry_after = retry_after
        msg = "Google Tasks API rate limit exceeded"
        if retry_after:
            msg += f". Retry after {retry_after} seconds"
        super().__init__(msg)
