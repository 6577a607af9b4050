"""Operation model shared by the interpreters, the executor and callers."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Optional

from src.tasks.models import Priority, Task, TaskFields, TaskStatus, parse_due_date


class OperationType(Enum):
    """Mutations an interpreter can request. Values are the wire names."""

    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    COMPLETE = "complete"
    BULK_UPDATE = "bulk_update"
    BULK_DELETE = "bulk_delete"

    @property
    def is_bulk(self) -> bool:
        """Whether the store receives this operation as one batch call."""
        return self in (OperationType.BULK_UPDATE, OperationType.BULK_DELETE)

    @property
    def targets_ids(self) -> bool:
        """Whether the operation addresses existing tasks by id."""
        return self != OperationType.ADD


_NEEDS_UPDATES = (OperationType.UPDATE, OperationType.BULK_UPDATE)


@dataclass(frozen=True)
class TaskSnapshot:
    """Read-only view of a task handed to the interpreter.

    Attributes:
        id: Opaque stable identifier.
        title: Task title.
        description: Optional description.
        status: Lifecycle state.
        priority: Priority level.
        due_date: Optional calendar due date.
        position: Manual ordering key.
    """

    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: Priority = Priority.MEDIUM
    due_date: Optional[date] = None
    position: int = 0

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @classmethod
    def from_task(cls, task: Task) -> "TaskSnapshot":
        """Freeze a stored task."""
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            due_date=task.due_date,
            position=task.position,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "position": self.position,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskSnapshot":
        return cls(
            id=str(data["id"]),
            title=data["title"],
            description=data.get("description") or None,
            status=TaskStatus(data.get("status") or "pending"),
            priority=Priority(data.get("priority") or "medium"),
            due_date=parse_due_date(data.get("due_date")),
            position=int(data.get("position") or 0),
        )


@dataclass
class Operation:
    """One mutation request produced by an interpreter.

    Build instances with the named constructors (``Operation.add(...)``,
    ``Operation.complete(...)``, ...) rather than directly.

    Attributes:
        action: The operation variant.
        message: Human-readable description of this operation.
        tasks: New tasks to create (ADD only).
        task_ids: Ids of existing tasks (all variants except ADD).
        updates: Fields to apply (UPDATE and BULK_UPDATE only).
    """

    action: OperationType
    message: str = ""
    tasks: list[TaskFields] = field(default_factory=list)
    task_ids: list[str] = field(default_factory=list)
    updates: Optional[TaskFields] = None

    @classmethod
    def add(cls, tasks: list[TaskFields], message: str) -> "Operation":
        return cls(action=OperationType.ADD, message=message, tasks=list(tasks))

    @classmethod
    def update(cls, task_ids: list[str], updates: TaskFields, message: str) -> "Operation":
        return cls(OperationType.UPDATE, message, task_ids=list(task_ids), updates=updates)

    @classmethod
    def delete(cls, task_ids: list[str], message: str) -> "Operation":
        return cls(OperationType.DELETE, message, task_ids=list(task_ids))

    @classmethod
    def complete(cls, task_ids: list[str], message: str) -> "Operation":
        return cls(OperationType.COMPLETE, message, task_ids=list(task_ids))

    @classmethod
    def bulk_update(cls, task_ids: list[str], updates: TaskFields, message: str) -> "Operation":
        return cls(OperationType.BULK_UPDATE, message, task_ids=list(task_ids), updates=updates)

    @classmethod
    def bulk_delete(cls, task_ids: list[str], message: str) -> "Operation":
        return cls(OperationType.BULK_DELETE, message, task_ids=list(task_ids))

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the wire field names."""
        data: dict[str, Any] = {"action": self.action.value}
        if self.action == OperationType.ADD:
            data["tasks"] = [t.to_dict() for t in self.tasks]
        else:
            data["taskIds"] = list(self.task_ids)
        if self.updates is not None:
            data["updates"] = self.updates.to_dict()
        data["message"] = self.message
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Operation":
        """Deserialize and check the shape required by the action.

        Raises:
            ValueError: If the action is unknown or a required field is
                missing or mistyped.
        """
        if not isinstance(data, dict):
            raise ValueError("Operation must be an object")

        action = OperationType(data.get("action"))
        message = data.get("message") or ""
        if not isinstance(message, str):
            raise ValueError("Operation message must be a string")

        if action == OperationType.ADD:
            raw_tasks = data.get("tasks")
            if not isinstance(raw_tasks, list) or not raw_tasks:
                raise ValueError("add operation requires a non-empty 'tasks' list")
            tasks = [TaskFields.from_dict(t) for t in raw_tasks]
            if any(not (t.title or "").strip() for t in tasks):
                raise ValueError("every added task needs a title")
            return cls.add(tasks, message)

        task_ids = data.get("taskIds")
        if not isinstance(task_ids, list) or not all(isinstance(i, (str, int)) for i in task_ids):
            raise ValueError(f"{action.value} operation requires a 'taskIds' list")
        task_ids = [str(i) for i in task_ids]

        updates = None
        if action in _NEEDS_UPDATES:
            if "updates" not in data:
                raise ValueError(f"{action.value} operation requires 'updates'")
            updates = TaskFields.from_dict(data["updates"])

        return cls(action=action, message=message, task_ids=task_ids, updates=updates)


@dataclass
class InterpretationResult:
    """Outcome of interpreting one command.

    Attributes:
        success: Whether the command mapped to a known action.
        operations: Ordered operations to execute (empty on failure).
        message: User-facing summary or failure explanation.
        error: Machine-oriented error tag on failure paths.
    """

    success: bool
    message: str
    operations: list[Operation] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: str, operations: Optional[list[Operation]] = None) -> "InterpretationResult":
        return cls(success=True, message=message, operations=list(operations or []))

    @classmethod
    def failure(cls, message: str, error: Optional[str] = None) -> "InterpretationResult":
        return cls(success=False, message=message, operations=[], error=error)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "operations": [op.to_dict() for op in self.operations],
            "message": self.message,
        }
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "InterpretationResult":
        """Deserialize a structured reply.

        Raises:
            ValueError: If the payload does not follow the result schema.
        """
        if not isinstance(data, dict):
            raise ValueError("Result must be a JSON object")

        success = data.get("success")
        if not isinstance(success, bool):
            raise ValueError("'success' must be a boolean")
        message = data.get("message")
        if not isinstance(message, str):
            raise ValueError("'message' must be a string")
        raw_operations = data.get("operations", [])
        if not isinstance(raw_operations, list):
            raise ValueError("'operations' must be a list")
        error = data.get("error")
        if error is not None and not isinstance(error, str):
            error = str(error)

        return cls(
            success=success,
            message=message,
            operations=[Operation.from_dict(op) for op in raw_operations],
            error=error,
        )
