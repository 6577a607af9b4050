"""Storage contract for task persistence."""

import logging
from abc import ABC, abstractmethod
from typing import Iterable

from .exceptions import TaskNotFoundError
from .models import Task, TaskFields

logger = logging.getLogger(__name__)


class TaskStore(ABC):
    """Abstract CRUD contract every task backend implements.

    The assistant only reaches storage through this interface. Bulk calls
    have a sequential default here; backends that can do a real batch
    (one file write, one transaction) override them.
    """

    @abstractmethod
    def list_tasks(self) -> list[Task]:
        """Return every task in the current scope, ordered by position."""
        pass

    @abstractmethod
    def get_task(self, task_id: str) -> Task:
        """Return one task.

        Raises:
            TaskNotFoundError: If the task does not exist.
        """
        pass

    @abstractmethod
    def create_task(self, fields: TaskFields) -> Task:
        """Create a task and return it with its id and position assigned.

        Raises:
            ValueError: If ``fields`` has no title.
        """
        pass

    @abstractmethod
    def update_task(self, task_id: str, fields: TaskFields) -> Task:
        """Apply the set fields to a task and return the updated task.

        Raises:
            TaskNotFoundError: If the task does not exist.
        """
        pass

    @abstractmethod
    def delete_task(self, task_id: str) -> None:
        """Delete a task.

        Raises:
            TaskNotFoundError: If the task does not exist.
        """
        pass

    def bulk_update(self, task_ids: Iterable[str], fields: TaskFields) -> list[Task]:
        """Apply the same fields to several tasks. Unknown ids are skipped.

        Returns:
            The tasks that were updated.
        """
        updated = []
        for task_id in task_ids:
            try:
                updated.append(self.update_task(task_id, fields))
            except TaskNotFoundError:
                logger.debug("Bulk update skipped unknown task %s", task_id)
        return updated

    def bulk_delete(self, task_ids: Iterable[str]) -> int:
        """Delete several tasks. Unknown ids are skipped.

        Returns:
            Number of tasks deleted.
        """
        deleted = 0
        for task_id in task_ids:
            try:
                self.delete_task(task_id)
                deleted += 1
            except TaskNotFoundError:
                logger.debug("Bulk delete skipped unknown task %s", task_id)
        return deleted

    @staticmethod
    def next_position(tasks: Iterable[Task]) -> int:
        """Position for a newly appended task: one past the current maximum."""
        return max((t.position for t in tasks), default=0) + 1
