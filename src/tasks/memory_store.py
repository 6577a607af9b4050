"""In-memory task store."""

import uuid
from datetime import datetime
from typing import Iterable, Optional

from .exceptions import TaskNotFoundError
from .models import Task, TaskFields
from .store import TaskStore


class InMemoryTaskStore(TaskStore):
    """Keeps tasks in a dict for the lifetime of the process.

    Useful for tests and for running the assistant without persistence.
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self._tasks: dict[str, Task] = {t.id: t for t in tasks or []}

    def list_tasks(self) -> list[Task]:
        return sorted(self._tasks.values(), key=lambda t: t.position)

    def get_task(self, task_id: str) -> Task:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise TaskNotFoundError(task_id) from None

    def create_task(self, fields: TaskFields) -> Task:
        task = Task.create(
            task_id=str(uuid.uuid4()),
            fields=fields,
            position=self.next_position(self._tasks.values()),
            now=datetime.now(),
        )
        self._tasks[task.id] = task
        return task

    def update_task(self, task_id: str, fields: TaskFields) -> Task:
        task = self.get_task(task_id).updated(fields)
        self._tasks[task_id] = task
        return task

    def delete_task(self, task_id: str) -> None:
        if self._tasks.pop(task_id, None) is None:
            raise TaskNotFoundError(task_id)
