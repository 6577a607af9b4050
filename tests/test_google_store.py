"""Unit tests for the Google Tasks store."""

from datetime import date
from unittest.mock import MagicMock

import pytest
from googleapiclient.errors import HttpError

from src.tasks import (
    GoogleTasksStore,
    Priority,
    RateLimitError,
    Task,
    TaskFields,
    TaskNotFoundError,
    TasksAPIError,
    TaskStatus,
)
from src.tasks.google_store import METADATA_PREFIX, from_api_response, to_api_body


def _http_error(status: int, content: bytes = b"error", retry_after: str | None = None) -> HttpError:
    mock_resp = MagicMock()
    mock_resp.status = status
    mock_resp.get.return_value = retry_after
    return HttpError(mock_resp, content)


@pytest.fixture
def mock_service():
    service = MagicMock()
    service.tasklists().list().execute.return_value = {
        "items": [
            {"id": "other", "title": "My Tasks"},
            {"id": "list1", "title": "Task Assistant"},
        ]
    }
    return service


@pytest.fixture
def store(mock_service):
    return GoogleTasksStore(service=mock_service)


class TestApiConversion:
    """Tests for converting between Task and API resources."""

    def test_to_api_body(self):
        task = Task(
            id="t1",
            title="Write report",
            description="Quarterly numbers",
            priority=Priority.HIGH,
            due_date=date(2026, 10, 20),
            position=3,
        )

        body = to_api_body(task)

        assert body["title"] == "Write report"
        assert body["status"] == "needsAction"
        assert body["due"] == "2026-10-20T00:00:00.000Z"
        assert body["notes"].startswith("Quarterly numbers\n\n" + METADATA_PREFIX)
        assert "priority:high" in body["notes"]
        assert "position:3" in body["notes"]
        assert "status:" not in body["notes"]

    def test_round_trip_preserves_fields(self):
        task = Task(
            id="t1",
            title="Write report",
            description="Quarterly numbers",
            status=TaskStatus.IN_PROGRESS,
            priority=Priority.LOW,
            due_date=date(2026, 10, 20),
            position=7,
        )

        restored = from_api_response(to_api_body(task))

        assert restored.id == "t1"
        assert restored.description == "Quarterly numbers"
        assert restored.status == TaskStatus.IN_PROGRESS
        assert restored.priority == Priority.LOW
        assert restored.due_date == date(2026, 10, 20)
        assert restored.position == 7

    def test_completed_status(self):
        task = from_api_response({"id": "t1", "title": "Done", "status": "completed"})
        assert task.status == TaskStatus.COMPLETED

    def test_plain_notes_without_metadata(self):
        task = from_api_response({"id": "t1", "title": "X", "notes": "Just notes"})

        assert task.description == "Just notes"
        assert task.priority == Priority.MEDIUM
        assert task.position == 0

    def test_bad_metadata_values_use_defaults(self):
        notes = f"{METADATA_PREFIX}\npriority:extreme\nposition:first"
        task = from_api_response({"id": "t1", "title": "X", "notes": notes})

        assert task.priority == Priority.MEDIUM
        assert task.position == 0
        assert task.description is None


class TestTaskListResolution:
    """Tests for finding or creating the configured list."""

    def test_uses_existing_list(self, store, mock_service):
        mock_service.tasks().list().execute.return_value = {"items": []}

        store.list_tasks()

        mock_service.tasklists().insert.assert_not_called()
        assert mock_service.tasks().list.call_args[1]["tasklist"] == "list1"

    def test_creates_missing_list(self, mock_service):
        mock_service.tasklists().list().execute.return_value = {"items": []}
        mock_service.tasklists().insert().execute.return_value = {"id": "new-list", "title": "Chores"}
        mock_service.tasks().list().execute.return_value = {"items": []}

        GoogleTasksStore(service=mock_service, list_name="Chores").list_tasks()

        mock_service.tasklists().insert.assert_called_with(body={"title": "Chores"})
        assert mock_service.tasks().list.call_args[1]["tasklist"] == "new-list"


class TestGoogleTasksStore:
    """Tests for TaskStore operations against a mocked service."""

    def test_list_tasks_pages_and_sorts(self, store, mock_service):
        mock_service.tasks().list().execute.side_effect = [
            {
                "items": [{"id": "b", "title": "B", "notes": f"{METADATA_PREFIX}\nposition:2"}],
                "nextPageToken": "page2",
            },
            {"items": [{"id": "a", "title": "A", "notes": f"{METADATA_PREFIX}\nposition:1"}]},
        ]

        tasks = store.list_tasks()

        assert [t.id for t in tasks] == ["a", "b"]
        kwargs = mock_service.tasks().list.call_args[1]
        assert kwargs["showCompleted"] is True
        assert kwargs["pageToken"] == "page2"

    def test_create_task_appends_position(self, store, mock_service):
        mock_service.tasks().list().execute.return_value = {
            "items": [{"id": "a", "title": "A", "notes": f"{METADATA_PREFIX}\nposition:4"}]
        }
        mock_service.tasks().insert().execute.return_value = {
            "id": "new1",
            "title": "Buy milk",
            "status": "needsAction",
            "notes": f"{METADATA_PREFIX}\npriority:high\nposition:5",
        }

        created = store.create_task(TaskFields(title="Buy milk", priority=Priority.HIGH))

        body = mock_service.tasks().insert.call_args[1]["body"]
        assert "id" not in body
        assert "position:5" in body["notes"]
        assert "priority:high" in body["notes"]
        assert created.id == "new1"
        assert created.position == 5

    def test_update_task_sends_merged_body(self, store, mock_service):
        mock_service.tasks().get().execute.return_value = {
            "id": "t1",
            "title": "Write report",
            "status": "needsAction",
            "notes": f"{METADATA_PREFIX}\npriority:low\nposition:2",
        }
        mock_service.tasks().update().execute.return_value = {
            "id": "t1",
            "title": "Write report",
            "status": "completed",
            "notes": f"{METADATA_PREFIX}\npriority:low\nposition:2",
        }

        updated = store.update_task("t1", TaskFields(status=TaskStatus.COMPLETED))

        body = mock_service.tasks().update.call_args[1]["body"]
        assert body["status"] == "completed"
        assert "position:2" in body["notes"]
        assert updated.is_completed

    def test_get_missing_task_raises_not_found(self, store, mock_service):
        mock_service.tasks().get().execute.side_effect = _http_error(404, b"Not found")

        with pytest.raises(TaskNotFoundError) as exc_info:
            store.get_task("nonexistent")
        assert exc_info.value.task_id == "nonexistent"

    def test_delete_missing_task_raises_not_found(self, store, mock_service):
        mock_service.tasks().delete().execute.side_effect = _http_error(404, b"Not found")

        with pytest.raises(TaskNotFoundError):
            store.delete_task("gone")

    def test_bulk_delete_skips_missing(self, store, mock_service):
        mock_service.tasks().delete().execute.side_effect = [None, _http_error(404), None]

        assert store.bulk_delete(["a", "b", "c"]) == 2

    def test_rate_limit_error(self, store, mock_service):
        mock_service.tasks().list().execute.side_effect = _http_error(429, b"Rate limit", retry_after="60")

        with pytest.raises(RateLimitError) as exc_info:
            store.list_tasks()
        assert exc_info.value.retry_after == 60

    def test_generic_api_error(self, store, mock_service):
        mock_service.tasks().list().execute.side_effect = _http_error(500, b"Internal server error")

        with pytest.raises(TasksAPIError) as exc_info:
            store.list_tasks()
        assert exc_info.value.status_code == 500

    def test_list_404_is_api_error(self, store, mock_service):
        mock_service.tasks().list().execute.side_effect = _http_error(404, b"Not found")

        with pytest.raises(TasksAPIError):
            store.list_tasks()
