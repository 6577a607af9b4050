"""Data models for command run results."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from src.assistant import ExecutionReport, InterpretationResult


@dataclass
class StepResult:
    """Result of a single run step."""

    name: str
    success: bool
    duration_seconds: float
    details: dict[str, Any]
    error: str | None = None
    skipped: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "success": self.success,
            "skipped": self.skipped,
            "duration_seconds": self.duration_seconds,
            "details": self.details,
            "error": self.error,
        }


@dataclass
class CommandRunResult:
    """Outcome of one command: interpretation, execution and step metrics.

    Attributes:
        command: The raw command text.
        result: What the interpreter produced (or the generic failure).
        report: Execution report, None when no operation ran.
        started_at: UTC start time.
        finished_at: UTC end time.
        steps: load_tasks, interpret and execute step results.
    """

    command: str
    result: InterpretationResult
    started_at: datetime
    report: Optional[ExecutionReport] = None
    finished_at: datetime | None = None
    steps: list[StepResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.result.success

    def to_dict(self) -> dict[str, Any]:
        """Response body: the interpretation result plus execution details."""
        data = self.result.to_dict()
        data["execution"] = self.report.to_dict() if self.report else None
        data["steps"] = [step.to_dict() for step in self.steps]
        return data
