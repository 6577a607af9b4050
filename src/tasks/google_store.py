"""Task store backed by the Google Tasks API."""

import logging
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

from googleapiclient.discovery import Resource
from googleapiclient.errors import HttpError

from .exceptions import RateLimitError, TaskNotFoundError, TasksAPIError
from .google_auth import TasksAuthenticator
from .models import Priority, Task, TaskFields, TaskList, TaskStatus, parse_due_date
from .store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_LIST_NAME = "Task Assistant"

# Google Tasks only knows title, notes, due and a two-state status. Everything
# else is kept in a metadata block appended to the notes.
METADATA_PREFIX = "---task-assistant---"


def to_api_body(task: Task) -> dict[str, Any]:
    """Convert a task to a Google Tasks API request body."""
    body: dict[str, Any] = {
        "title": task.title[:1024],  # API limit
        "status": "completed" if task.is_completed else "needsAction",
    }
    if task.id:
        body["id"] = task.id

    metadata_lines = [
        METADATA_PREFIX,
        f"priority:{task.priority.value}",
        f"position:{task.position}",
    ]
    if task.status == TaskStatus.IN_PROGRESS:
        metadata_lines.append(f"status:{task.status.value}")

    notes_parts = []
    if task.description:
        notes_parts.append(task.description)
    notes_parts.append("\n".join(metadata_lines))
    body["notes"] = "\n\n".join(notes_parts)

    if task.due_date:
        # Google Tasks expects RFC 3339 date-time for due
        body["due"] = f"{task.due_date.isoformat()}T00:00:00.000Z"

    return body


def from_api_response(data: dict[str, Any]) -> Task:
    """Create a task from a Google Tasks API resource."""
    notes = data.get("notes") or ""
    description = notes
    metadata: dict[str, str] = {}

    if METADATA_PREFIX in notes:
        description, _, metadata_section = notes.partition(METADATA_PREFIX)
        description = description.rstrip()
        for line in metadata_section.strip().splitlines():
            key, sep, value = line.partition(":")
            if sep:
                metadata[key.strip()] = value.strip()

    if data.get("status") == "completed":
        status = TaskStatus.COMPLETED
    elif metadata.get("status") == TaskStatus.IN_PROGRESS.value:
        status = TaskStatus.IN_PROGRESS
    else:
        status = TaskStatus.PENDING

    try:
        priority = Priority(metadata.get("priority", "medium"))
    except ValueError:
        priority = Priority.MEDIUM

    try:
        position = int(metadata.get("position", "0"))
    except ValueError:
        position = 0

    updated = None
    if data.get("updated"):
        updated = datetime.fromisoformat(data["updated"].replace("Z", "+00:00"))

    return Task(
        id=data.get("id", ""),
        title=data.get("title", ""),
        description=description or None,
        status=status,
        priority=priority,
        due_date=parse_due_date(data.get("due")),
        position=position,
        updated_at=updated,
    )


class GoogleTasksStore(TaskStore):
    """Stores tasks in one named Google Tasks list.

    The list is looked up by title and created if missing. Bulk operations
    use the sequential defaults from ``TaskStore``.
    """

    def __init__(
        self,
        authenticator: Optional[TasksAuthenticator] = None,
        service: Optional[Resource] = None,
        list_name: str = DEFAULT_LIST_NAME,
    ):
        """Initialize the store.

        Args:
            authenticator: TasksAuthenticator for API access.
                Created with defaults if not provided.
            service: Pre-configured Tasks API service for testing.
                Takes precedence over authenticator.
            list_name: Title of the task list to use.
        """
        self._authenticator = authenticator
        self._service = service
        self._list_name = list_name
        self._list_id: Optional[str] = None

    def _get_service(self) -> Resource:
        """Get or create the Google Tasks API service."""
        if self._service is None:
            if self._authenticator is None:
                self._authenticator = TasksAuthenticator()
            self._service = self._authenticator.get_service()
        return self._service

    def _handle_http_error(self, error: HttpError, task_id: str = "", context: str = "") -> None:
        """Convert HttpError to the matching tasks exception.

        Raises:
            TaskNotFoundError: On 404 when a task id is known.
            RateLimitError: On 429.
            TasksAPIError: For other API errors.
        """
        status_code = error.resp.status
        reason = error.reason if hasattr(error, "reason") else str(error)
        logger.error("Google Tasks API error (status=%d): %s", status_code, reason)

        if status_code == 404 and task_id:
            raise TaskNotFoundError(task_id) from error
        if status_code == 429:
            retry_after = error.resp.get("retry-after")
            raise RateLimitError(
                retry_after=int(retry_after) if retry_after else None
            ) from error
        msg = f"Google Tasks API error: {reason}"
        if context:
            msg = f"{context}: {msg}"
        raise TasksAPIError(msg, status_code=status_code, reason=reason) from error

    # -------------------- Task List --------------------

    def _get_list_id(self) -> str:
        """Return the id of the configured list, creating the list if needed."""
        if self._list_id:
            return self._list_id

        service = self._get_service()
        try:
            result = service.tasklists().list().execute()
            for item in result.get("items", []):
                task_list = TaskList.from_api_response(item)
                if task_list.title == self._list_name:
                    self._list_id = task_list.id
                    logger.debug("Using task list '%s' (id=%s)", task_list.title, task_list.id)
                    return task_list.id

            created = service.tasklists().insert(body={"title": self._list_name}).execute()
        except HttpError as e:
            self._handle_http_error(e, context=f"Failed to resolve task list '{self._list_name}'")
            raise

        task_list = TaskList.from_api_response(created)
        self._list_id = task_list.id
        logger.info("Created task list '%s' (id=%s)", task_list.title, task_list.id)
        return task_list.id

    def _iter_items(self) -> Iterator[dict[str, Any]]:
        list_id = self._get_list_id()
        service = self._get_service()
        page_token = None
        try:
            while True:
                result = (
                    service.tasks()
                    .list(
                        tasklist=list_id,
                        showCompleted=True,
                        showHidden=True,
                        maxResults=100,
                        pageToken=page_token,
                    )
                    .execute()
                )
                yield from result.get("items", [])
                page_token = result.get("nextPageToken")
                if not page_token:
                    break
        except HttpError as e:
            self._handle_http_error(e, context="Failed to list tasks")
            raise

    # -------------------- TaskStore --------------------

    def list_tasks(self) -> list[Task]:
        tasks = [from_api_response(item) for item in self._iter_items()]
        return sorted(tasks, key=lambda t: t.position)

    def get_task(self, task_id: str) -> Task:
        list_id = self._get_list_id()
        try:
            result = self._get_service().tasks().get(tasklist=list_id, task=task_id).execute()
        except HttpError as e:
            self._handle_http_error(e, task_id=task_id)
            raise
        return from_api_response(result)

    def create_task(self, fields: TaskFields) -> Task:
        position = self.next_position(self.list_tasks())
        draft = Task.create(task_id="", fields=fields, position=position,
                            now=datetime.now(timezone.utc))
        list_id = self._get_list_id()
        try:
            result = (
                self._get_service()
                .tasks()
                .insert(tasklist=list_id, body=to_api_body(draft))
                .execute()
            )
        except HttpError as e:
            self._handle_http_error(e, context="Failed to create task")
            raise
        created = from_api_response(result)
        logger.info("Created task '%s' (id=%s)", created.title, created.id)
        return created

    def update_task(self, task_id: str, fields: TaskFields) -> Task:
        task = self.get_task(task_id).updated(fields)
        list_id = self._get_list_id()
        try:
            result = (
                self._get_service()
                .tasks()
                .update(tasklist=list_id, task=task_id, body=to_api_body(task))
                .execute()
            )
        except HttpError as e:
            self._handle_http_error(e, task_id=task_id)
            raise
        return from_api_response(result)

    def delete_task(self, task_id: str) -> None:
        list_id = self._get_list_id()
        try:
            self._get_service().tasks().delete(tasklist=list_id, task=task_id).execute()
        except HttpError as e:
            self._handle_http_error(e, task_id=task_id)
            raise
