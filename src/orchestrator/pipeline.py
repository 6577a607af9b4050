"""TaskAssistantOrchestrator - runs one command from snapshot to store."""

import logging
import time
from datetime import date, datetime, timezone
from typing import Callable, Optional

from src.assistant import (
    CommandInterpreter,
    ExecutionReport,
    InterpretationResult,
    OperationExecutor,
    SuggestionGenerator,
    TaskSnapshot,
    dashboard_suggestions,
)
from src.config import AssistantSettings, build_interpreter, build_suggestion_generator, build_task_store
from src.tasks import Task, TaskStore, TasksError

from .models import CommandRunResult, StepResult

logger = logging.getLogger(__name__)

LOAD_FAILURE_MESSAGE = "I couldn't load your tasks right now. Please try again."


class TaskAssistantOrchestrator:
    """Connects the task store, the interpreter and the executor.

    Each command gets a fresh snapshot from the store, is interpreted
    against it, and its operations are applied to the same store. Steps are
    timed and isolated: ``run_command`` never raises.

    Example:
        run = TaskAssistantOrchestrator().run_command("Add task: Buy milk")
        print(run.result.message)
    """

    def __init__(
        self,
        store: Optional[TaskStore] = None,
        interpreter: Optional[CommandInterpreter] = None,
        executor: Optional[OperationExecutor] = None,
        suggestion_generator: Optional[SuggestionGenerator] = None,
        settings: Optional[AssistantSettings] = None,
    ):
        self._store = store
        self._interpreter = interpreter
        self._executor = executor
        self._suggestion_generator = suggestion_generator
        self._settings = settings

    def _get_settings(self) -> AssistantSettings:
        if self._settings is None:
            self._settings = AssistantSettings.from_env()
        return self._settings

    def _get_store(self) -> TaskStore:
        if self._store is None:
            self._store = build_task_store(self._get_settings())
        return self._store

    def _get_interpreter(self) -> CommandInterpreter:
        if self._interpreter is None:
            self._interpreter = build_interpreter(self._get_settings())
        return self._interpreter

    def _get_executor(self) -> OperationExecutor:
        if self._executor is None:
            self._executor = OperationExecutor(self._get_store())
        return self._executor

    def _get_suggestion_generator(self) -> SuggestionGenerator:
        if self._suggestion_generator is None:
            self._suggestion_generator = build_suggestion_generator(self._get_settings())
        return self._suggestion_generator

    @staticmethod
    def _skip_step(name: str, success: bool = False) -> StepResult:
        """Record a step that did not run."""
        return StepResult(
            name=name,
            success=success,
            duration_seconds=0.0,
            details={},
            skipped=True,
        )

    def _run_step(self, name: str, fn: Callable[[], dict]) -> StepResult:
        """Run a step with timing and error isolation."""
        start = time.monotonic()
        try:
            details = fn()
            duration = time.monotonic() - start
            return StepResult(
                name=name,
                success=True,
                duration_seconds=round(duration, 2),
                details=details,
            )
        except Exception as e:
            duration = time.monotonic() - start
            logger.exception("Step '%s' failed", name)
            return StepResult(
                name=name,
                success=False,
                duration_seconds=round(duration, 2),
                details={},
                error=str(e),
            )

    def snapshot(self) -> list[TaskSnapshot]:
        """Current tasks as interpreter snapshots."""
        return [TaskSnapshot.from_task(t) for t in self._get_store().list_tasks()]

    def list_tasks(self) -> list[Task]:
        return self._get_store().list_tasks()

    def dashboard(self, today: Optional[date] = None) -> tuple[list[Task], list[str]]:
        """Current tasks plus the rule-based suggestions shown next to them."""
        tasks = self.list_tasks()
        snapshot = [TaskSnapshot.from_task(t) for t in tasks]
        return tasks, dashboard_suggestions(snapshot, today)

    def run_command(self, command: str, today: Optional[date] = None) -> CommandRunResult:
        """Interpret a command and apply its operations.

        Steps:
            1. Load a fresh task snapshot
            2. Interpret the command against it
            3. Execute the operations (skipped when there are none)

        Args:
            command: Raw user text.
            today: Reference date for relative dates. Defaults to today.

        Returns:
            CommandRunResult with the interpretation, execution report and
            per-step metrics.
        """
        today = today or date.today()
        started_at = datetime.now(timezone.utc)

        tasks: list[TaskSnapshot] = []
        interpretation: Optional[InterpretationResult] = None
        report: Optional[ExecutionReport] = None

        def load_step() -> dict:
            nonlocal tasks
            tasks = self.snapshot()
            return {"tasks_loaded": len(tasks)}

        load_result = self._run_step("load_tasks", load_step)
        steps = [load_result]

        if not load_result.success:
            steps.append(self._skip_step("interpret"))
            steps.append(self._skip_step("execute"))
            return CommandRunResult(
                command=command,
                result=InterpretationResult.failure(LOAD_FAILURE_MESSAGE, error=load_result.error),
                started_at=started_at,
                finished_at=datetime.now(timezone.utc),
                steps=steps,
            )

        def interpret_step() -> dict:
            nonlocal interpretation
            interpretation = self._get_interpreter().interpret(command, tasks, today)
            logger.info(
                "Interpreted %r: success=%s operations=%d",
                command,
                interpretation.success,
                len(interpretation.operations),
            )
            return {
                "success": interpretation.success,
                "operations": len(interpretation.operations),
            }

        interpret_result = self._run_step("interpret", interpret_step)
        steps.append(interpret_result)

        if interpretation is None:
            interpretation = InterpretationResult.failure(
                "Something went wrong while processing your command. Please try again.",
                error=interpret_result.error,
            )

        if not interpretation.success or not interpretation.operations:
            steps.append(self._skip_step("execute", success=interpret_result.success))
        else:
            def execute_step() -> dict:
                nonlocal report
                report = self._get_executor().execute(interpretation.operations)
                details = {
                    "operations_applied": report.operations_applied,
                    "tasks_created": len(report.created),
                    "tasks_updated": report.updated,
                    "tasks_deleted": report.deleted,
                }
                if report.skipped_ids:
                    details["skipped_ids"] = report.skipped_ids
                if report.errors:
                    details["errors"] = report.errors
                return details

            steps.append(self._run_step("execute", execute_step))

        return CommandRunResult(
            command=command,
            result=interpretation,
            report=report,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            steps=steps,
        )

    def suggest(self, today: Optional[date] = None) -> list[str]:
        """Command suggestions for the current tasks; empty if the store fails."""
        try:
            tasks = self.snapshot()
        except TasksError:
            logger.exception("Could not load tasks for suggestions")
            return []
        return self._get_suggestion_generator().get_suggestions(tasks, today)
