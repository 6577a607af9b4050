"""Task store backed by a single JSON file."""

import json
import logging
import os
import tempfile
import uuid
from datetime import datetime
from pathlib import Path
from typing import Iterable, Union

from .exceptions import TaskNotFoundError, TaskStoreError
from .models import Task, TaskFields
from .store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_TASKS_FILE = Path("data") / "tasks.json"


class JsonFileTaskStore(TaskStore):
    """Persists tasks as ``{"tasks": [...]}`` in a JSON document.

    The file and its parent directory are created on first use. Every
    mutation rewrites the whole file through a temporary file and an atomic
    rename, so a crash never leaves a half-written document behind. Bulk
    operations read and write the file once.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_TASKS_FILE):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_file(self) -> None:
        if self._path.exists():
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._write([])
        logger.info("Created task file %s", self._path)

    def _read(self) -> list[Task]:
        self._ensure_file()
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
            return [Task.from_dict(item) for item in data.get("tasks", [])]
        except (OSError, json.JSONDecodeError, AttributeError, KeyError, ValueError) as e:
            raise TaskStoreError(f"Failed to read tasks from {self._path}: {e}") from e

    def _write(self, tasks: Iterable[Task]) -> None:
        document = {"tasks": [t.to_dict() for t in tasks]}
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self._path.parent, prefix=".tasks-", suffix=".json"
            )
        except OSError as e:
            raise TaskStoreError(f"Failed to write tasks to {self._path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_path, self._path)
        except (OSError, TypeError, ValueError) as e:
            Path(tmp_path).unlink(missing_ok=True)
            raise TaskStoreError(f"Failed to write tasks to {self._path}: {e}") from e

    def list_tasks(self) -> list[Task]:
        return sorted(self._read(), key=lambda t: t.position)

    def get_task(self, task_id: str) -> Task:
        for task in self._read():
            if task.id == task_id:
                return task
        raise TaskNotFoundError(task_id)

    def create_task(self, fields: TaskFields) -> Task:
        tasks = self._read()
        task = Task.create(
            task_id=str(uuid.uuid4()),
            fields=fields,
            position=self.next_position(tasks),
            now=datetime.now(),
        )
        tasks.append(task)
        self._write(tasks)
        logger.info("Created task '%s' (id=%s)", task.title, task.id)
        return task

    def update_task(self, task_id: str, fields: TaskFields) -> Task:
        tasks = self._read()
        for index, task in enumerate(tasks):
            if task.id == task_id:
                tasks[index] = task.updated(fields)
                self._write(tasks)
                return tasks[index]
        raise TaskNotFoundError(task_id)

    def delete_task(self, task_id: str) -> None:
        tasks = self._read()
        remaining = [t for t in tasks if t.id != task_id]
        if len(remaining) == len(tasks):
            raise TaskNotFoundError(task_id)
        self._write(remaining)

    def bulk_update(self, task_ids: Iterable[str], fields: TaskFields) -> list[Task]:
        wanted = set(task_ids)
        now = datetime.now()
        tasks = self._read()
        updated = []
        for index, task in enumerate(tasks):
            if task.id in wanted:
                tasks[index] = task.updated(fields, now)
                updated.append(tasks[index])
        if updated:
            self._write(tasks)
        logger.debug("Bulk updated %d of %d requested tasks", len(updated), len(wanted))
        return updated

    def bulk_delete(self, task_ids: Iterable[str]) -> int:
        wanted = set(task_ids)
        tasks = self._read()
        remaining = [t for t in tasks if t.id not in wanted]
        deleted = len(tasks) - len(remaining)
        if deleted:
            self._write(remaining)
        logger.debug("Bulk deleted %d of %d requested tasks", deleted, len(wanted))
        return deleted
