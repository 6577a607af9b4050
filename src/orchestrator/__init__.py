"""Command orchestrator for the task assistant.

Connects a TaskStore, the CommandInterpreter and the OperationExecutor
into a single command run with per-step error isolation and structured
results.
"""

from .models import CommandRunResult, StepResult
from .pipeline import TaskAssistantOrchestrator

__all__ = [
    "TaskAssistantOrchestrator",
    "CommandRunResult",
    "StepResult",
]
