"""Task storage module.

Defines the task record model and the ``TaskStore`` CRUD contract the
assistant executes operations against, with in-memory, JSON-file and
Google Tasks backends.
"""

from .exceptions import (
    RateLimitError,
    TaskNotFoundError,
    TasksAPIError,
    TasksAuthError,
    TasksError,
    TaskStoreError,
)
from .google_store import GoogleTasksStore
from .json_store import JsonFileTaskStore
from .memory_store import InMemoryTaskStore
from .models import Priority, Task, TaskFields, TaskList, TaskStatus
from .store import TaskStore

__all__ = [
    # Stores
    "TaskStore",
    "InMemoryTaskStore",
    "JsonFileTaskStore",
    "GoogleTasksStore",
    # Models
    "Task",
    "TaskFields",
    "TaskList",
    "TaskStatus",
    "Priority",
    # Exceptions
    "TasksError",
    "TaskStoreError",
    "TasksAuthError",
    "TasksAPIError",
    "TaskNotFoundError",
    "RateLimitError",
]
