"""Unit tests for the in-memory and JSON file task stores."""

import json
from unittest.mock import patch

import pytest

from src.tasks import (
    InMemoryTaskStore,
    JsonFileTaskStore,
    Priority,
    Task,
    TaskFields,
    TaskNotFoundError,
    TaskStatus,
    TaskStoreError,
)


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    """Each contract test runs against both local backends."""
    if request.param == "memory":
        return InMemoryTaskStore()
    return JsonFileTaskStore(tmp_path / "data" / "tasks.json")


class TestStoreContract:
    """CRUD behavior shared by local stores."""

    def test_create_assigns_id_and_position(self, store):
        first = store.create_task(TaskFields(title="First"))
        second = store.create_task(TaskFields(title="Second", priority=Priority.HIGH))

        assert first.id and second.id and first.id != second.id
        assert (first.position, second.position) == (1, 2)
        assert second.priority == Priority.HIGH
        assert [t.title for t in store.list_tasks()] == ["First", "Second"]

    def test_position_follows_maximum_not_count(self, store):
        a = store.create_task(TaskFields(title="A"))
        b = store.create_task(TaskFields(title="B"))
        store.delete_task(a.id)

        c = store.create_task(TaskFields(title="C"))

        assert c.position == b.position + 1

    def test_create_without_title_raises(self, store):
        with pytest.raises(ValueError):
            store.create_task(TaskFields(priority=Priority.LOW))

    def test_update(self, store):
        task = store.create_task(TaskFields(title="A"))

        updated = store.update_task(task.id, TaskFields(status=TaskStatus.COMPLETED))

        assert updated.is_completed
        assert store.get_task(task.id).is_completed

    def test_update_unknown_raises(self, store):
        with pytest.raises(TaskNotFoundError):
            store.update_task("missing", TaskFields(title="x"))

    def test_delete_unknown_raises(self, store):
        with pytest.raises(TaskNotFoundError):
            store.delete_task("missing")

    def test_bulk_update_skips_unknown(self, store):
        a = store.create_task(TaskFields(title="A"))
        b = store.create_task(TaskFields(title="B"))

        updated = store.bulk_update([a.id, "missing", b.id], TaskFields(priority=Priority.LOW))

        assert sorted(t.id for t in updated) == sorted([a.id, b.id])
        assert all(t.priority == Priority.LOW for t in store.list_tasks())

    def test_bulk_delete_skips_unknown(self, store):
        a = store.create_task(TaskFields(title="A"))
        b = store.create_task(TaskFields(title="B"))

        assert store.bulk_delete([a.id, "missing"]) == 1
        assert [t.id for t in store.list_tasks()] == [b.id]


class TestInMemoryTaskStore:
    """Tests specific to InMemoryTaskStore."""

    def test_seeded_tasks_sorted_by_position(self):
        store = InMemoryTaskStore([Task(id="b", title="B", position=5), Task(id="a", title="A", position=2)])
        assert [t.id for t in store.list_tasks()] == ["a", "b"]


class TestJsonFileTaskStore:
    """Tests specific to JsonFileTaskStore."""

    def test_creates_empty_document_on_first_use(self, tmp_path):
        path = tmp_path / "nested" / "tasks.json"
        store = JsonFileTaskStore(path)

        assert store.list_tasks() == []
        assert json.loads(path.read_text()) == {"tasks": []}

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "tasks.json"
        created = JsonFileTaskStore(path).create_task(TaskFields(title="Persist me"))

        reloaded = JsonFileTaskStore(path).get_task(created.id)

        assert reloaded.title == "Persist me"
        assert reloaded.position == 1

    def test_document_layout(self, tmp_path):
        path = tmp_path / "tasks.json"
        JsonFileTaskStore(path).create_task(TaskFields(title="A", priority=Priority.HIGH))

        item = json.loads(path.read_text())["tasks"][0]
        assert item["title"] == "A"
        assert item["priority"] == "high"
        assert item["status"] == "pending"
        assert item["position"] == 1

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "tasks.json"
        path.write_text("{not json")

        with pytest.raises(TaskStoreError):
            JsonFileTaskStore(path).list_tasks()

    def test_bulk_delete_keeps_other_positions(self, tmp_path):
        store = JsonFileTaskStore(tmp_path / "tasks.json")
        ids = [store.create_task(TaskFields(title=f"T{i}")).id for i in range(5)]

        store.bulk_delete([ids[0], ids[2], ids[4]])

        assert [t.position for t in store.list_tasks()] == [2, 4]

    def test_no_temp_files_left_behind(self, tmp_path):
        store = JsonFileTaskStore(tmp_path / "tasks.json")
        store.create_task(TaskFields(title="A"))

        assert [p.name for p in tmp_path.iterdir()] == ["tasks.json"]

    def test_failed_write_removes_temp_file(self, tmp_path):
        store = JsonFileTaskStore(tmp_path / "tasks.json")
        store.create_task(TaskFields(title="A"))

        with patch("src.tasks.json_store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(TaskStoreError):
                store.create_task(TaskFields(title="B"))

        assert [p.name for p in tmp_path.iterdir()] == ["tasks.json"]
        assert [t.title for t in store.list_tasks()] == ["A"]
