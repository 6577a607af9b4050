"""Applies interpreted operations to a task store."""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from src.tasks.exceptions import TaskNotFoundError
from src.tasks.models import Task, TaskFields, TaskStatus
from src.tasks.store import TaskStore

from .models import Operation, OperationType

logger = logging.getLogger(__name__)


@dataclass
class ExecutionReport:
    """What an execution pass did to the store.

    Attributes:
        operations_applied: Operations that ran, even partially.
        created: Tasks created by add operations.
        updated: Number of task updates (including completions).
        deleted: Number of tasks deleted.
        skipped_ids: Ids that did not exist in the store.
        errors: One message per failed store call.
    """

    operations_applied: int = 0
    created: list[Task] = field(default_factory=list)
    updated: int = 0
    deleted: int = 0
    skipped_ids: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "operations_applied": self.operations_applied,
            "created": [t.to_dict() for t in self.created],
            "updated": self.updated,
            "deleted": self.deleted,
            "skipped_ids": list(self.skipped_ids),
            "errors": list(self.errors),
        }


class OperationExecutor:
    """Runs operations against a TaskStore, strictly in order.

    Execution is best-effort: an unknown id is skipped, a failing store call
    is logged and recorded, and the remaining ids and operations still run.
    Nothing is rolled back.
    """

    def __init__(self, store: TaskStore):
        self._store = store

    def execute(self, operations: Iterable[Operation]) -> ExecutionReport:
        """Apply operations one after another.

        Args:
            operations: Operations in the order the interpreter produced them.

        Returns:
            ExecutionReport describing the changes made.
        """
        report = ExecutionReport()
        for operation in operations:
            handler = self._HANDLERS[operation.action]
            handler(self, operation, report)
            report.operations_applied += 1
        logger.info(
            "Executed %d operation(s): %d created, %d updated, %d deleted, %d error(s)",
            report.operations_applied,
            len(report.created),
            report.updated,
            report.deleted,
            len(report.errors),
        )
        return report

    def _record_failure(self, report: ExecutionReport, action: str, target: str, error: Exception) -> None:
        logger.exception("Failed to %s %s", action, target)
        report.errors.append(f"{action} {target}: {error}")

    def _add(self, operation: Operation, report: ExecutionReport) -> None:
        for fields in operation.tasks:
            try:
                report.created.append(self._store.create_task(fields))
            except Exception as e:
                self._record_failure(report, "create", repr(fields.title), e)

    def _update_each(self, task_ids: list[str], fields: TaskFields, report: ExecutionReport) -> None:
        for task_id in task_ids:
            try:
                self._store.update_task(task_id, fields)
                report.updated += 1
            except TaskNotFoundError:
                logger.debug("Skipping unknown task %s", task_id)
                report.skipped_ids.append(task_id)
            except Exception as e:
                self._record_failure(report, "update", task_id, e)

    def _update(self, operation: Operation, report: ExecutionReport) -> None:
        self._update_each(operation.task_ids, operation.updates or TaskFields(), report)

    def _complete(self, operation: Operation, report: ExecutionReport) -> None:
        self._update_each(operation.task_ids, TaskFields(status=TaskStatus.COMPLETED), report)

    def _delete(self, operation: Operation, report: ExecutionReport) -> None:
        for task_id in operation.task_ids:
            try:
                self._store.delete_task(task_id)
                report.deleted += 1
            except TaskNotFoundError:
                logger.debug("Skipping unknown task %s", task_id)
                report.skipped_ids.append(task_id)
            except Exception as e:
                self._record_failure(report, "delete", task_id, e)

    def _bulk_update(self, operation: Operation, report: ExecutionReport) -> None:
        if not operation.task_ids:
            return
        try:
            updated = self._store.bulk_update(operation.task_ids, operation.updates or TaskFields())
        except Exception as e:
            self._record_failure(report, "bulk update", f"{len(operation.task_ids)} task(s)", e)
            return
        report.updated += len(updated)
        found = {t.id for t in updated}
        report.skipped_ids.extend(i for i in operation.task_ids if i not in found)

    def _bulk_delete(self, operation: Operation, report: ExecutionReport) -> None:
        if not operation.task_ids:
            return
        try:
            deleted = self._store.bulk_delete(operation.task_ids)
        except Exception as e:
            self._record_failure(report, "bulk delete", f"{len(operation.task_ids)} task(s)", e)
            return
        report.deleted += deleted

    _HANDLERS = {
        OperationType.ADD: _add,
        OperationType.UPDATE: _update,
        OperationType.COMPLETE: _complete,
        OperationType.DELETE: _delete,
        OperationType.BULK_UPDATE: _bulk_update,
        OperationType.BULK_DELETE: _bulk_delete,
    }


def execute_operations(operations: Iterable[Operation], store: TaskStore) -> ExecutionReport:
    """Convenience wrapper around ``OperationExecutor(store).execute``."""
    return OperationExecutor(store).execute(operations)
