"""Data models for the tasks module."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


class TaskStatus(Enum):
    """Task lifecycle states."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Priority(Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def parse_due_date(value: Any) -> Optional[date]:
    """Parse a due date from a stored or wire value.

    Accepts None, a date, a datetime, ``YYYY-MM-DD`` or a full ISO
    timestamp (only the calendar date is kept).

    Raises:
        ValueError: If the value is not a recognizable date.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid due date: {value!r}")
    return date.fromisoformat(value.strip().split("T")[0])


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class TaskFields:
    """A partial set of task fields.

    Used both for new tasks (``title`` required by the store) and for
    updates, where only the fields that are set get applied. A field left
    as None means "not provided".

    Attributes:
        title: Task title.
        description: Free-text description.
        status: Lifecycle state.
        priority: Priority level.
        due_date: Calendar due date.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    due_date: Optional[date] = None

    @property
    def is_empty(self) -> bool:
        """True when no field is set."""
        return not self.to_dict()

    def to_dict(self) -> dict[str, Any]:
        """Serialize the fields that are set."""
        data: dict[str, Any] = {}
        if self.title is not None:
            data["title"] = self.title
        if self.description is not None:
            data["description"] = self.description
        if self.status is not None:
            data["status"] = self.status.value
        if self.priority is not None:
            data["priority"] = self.priority.value
        if self.due_date is not None:
            data["due_date"] = self.due_date.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "TaskFields":
        """Deserialize and validate a partial task.

        Unknown keys are ignored.

        Raises:
            ValueError: If a field has the wrong type or an unknown enum value.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Task fields must be an object, got {type(data).__name__}")

        title = data.get("title")
        if title is not None and not isinstance(title, str):
            raise ValueError("Task title must be a string")
        description = data.get("description")
        if description is not None and not isinstance(description, str):
            raise ValueError("Task description must be a string")

        status = TaskStatus(data["status"]) if data.get("status") else None
        priority = Priority(data["priority"]) if data.get("priority") else None

        return cls(
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=parse_due_date(data.get("due_date")),
        )


@dataclass
class Task:
    """A stored task.

    Attributes:
        id: Opaque unique identifier assigned by the store.
        title: Non-empty title.
        description: Optional free-text description.
        status: Lifecycle state.
        priority: Priority level.
        due_date: Optional calendar due date.
        position: Manual ordering key, not necessarily contiguous.
        created_at: When the task was created.
        updated_at: When the task was last modified.
    """

    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: Priority = Priority.MEDIUM
    due_date: Optional[date] = None
    position: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        task_id: str,
        fields: TaskFields,
        position: int,
        now: Optional[datetime] = None,
    ) -> "Task":
        """Build a new task from partial fields, applying defaults.

        Raises:
            ValueError: If no title is given.
        """
        title = (fields.title or "").strip()
        if not title:
            raise ValueError("Cannot create a task without a title")
        now = now or datetime.now()
        return cls(
            id=task_id,
            title=title,
            description=fields.description or None,
            status=fields.status or TaskStatus.PENDING,
            priority=fields.priority or Priority.MEDIUM,
            due_date=fields.due_date,
            position=position,
            created_at=now,
            updated_at=now,
        )

    def updated(self, fields: TaskFields, now: Optional[datetime] = None) -> "Task":
        """Return a copy with the set fields applied."""
        changes: dict[str, Any] = {
            k: v
            for k, v in (
                ("title", fields.title),
                ("description", fields.description),
                ("status", fields.status),
                ("priority", fields.priority),
                ("due_date", fields.due_date),
            )
            if v is not None
        }
        changes["updated_at"] = now or datetime.now()
        return replace(self, **changes)

    @property
    def is_completed(self) -> bool:
        """Check if task is marked complete."""
        return self.status == TaskStatus.COMPLETED

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for storage."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "position": self.position,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Deserialize from dictionary."""
        return cls(
            id=str(data["id"]),
            title=data["title"],
            description=data.get("description") or None,
            status=TaskStatus(data.get("status") or "pending"),
            priority=Priority(data.get("priority") or "medium"),
            due_date=parse_due_date(data.get("due_date")),
            position=int(data.get("position") or 0),
            created_at=_parse_timestamp(data.get("created_at")),
            updated_at=_parse_timestamp(data.get("updated_at")),
        )


@dataclass
class TaskList:
    """A named task list on a hosted store.

    Attributes:
        id: Unique identifier for the task list.
        title: Human-readable title of the list.
        updated: When the list was last modified.
    """

    id: str
    title: str
    updated: Optional[datetime] = field(default=None, compare=False)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "TaskList":
        """Create from Google Tasks API response."""
        return cls(
            id=data["id"],
            title=data["title"],
            updated=_parse_timestamp(data.get("updated")),
        )
