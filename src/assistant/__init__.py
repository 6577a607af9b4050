"""Natural-language command interpretation for task management.

Turns a free-text command plus the current task snapshot into an ordered
list of operations and applies them to a task store.

Public API:
    - CommandInterpreter: Model-first interpreter with local fallback
    - ModelInterpreter: Completion-service interpreter
    - FallbackInterpreter: Deterministic pattern-based interpreter
    - OperationExecutor, ExecutionReport: Apply operations to a TaskStore
    - SuggestionGenerator, ModelSuggestionSource: Command suggestions
    - Operation, OperationType, InterpretationResult, TaskSnapshot: Models

Example:
    from src.assistant import CommandInterpreter, OperationExecutor, TaskSnapshot

    snapshot = [TaskSnapshot.from_task(t) for t in store.list_tasks()]
    result = CommandInterpreter().interpret("Delete all completed tasks", snapshot)
    if result.success:
        OperationExecutor(store).execute(result.operations)
"""

from .exceptions import InterpreterError, MalformedResponseError, ServiceUnavailableError
from .executor import ExecutionReport, OperationExecutor, execute_operations
from .fallback import FallbackInterpreter
from .interpreter import CommandInterpreter, Interpreter
from .model_interpreter import ModelInterpreter
from .models import InterpretationResult, Operation, OperationType, TaskSnapshot
from .suggestions import (
    ModelSuggestionSource,
    SuggestionGenerator,
    dashboard_suggestions,
    interpreter_suggestions,
    suggest,
)

__all__ = [
    # Interpreters
    "CommandInterpreter",
    "FallbackInterpreter",
    "Interpreter",
    "ModelInterpreter",
    # Execution
    "ExecutionReport",
    "OperationExecutor",
    "execute_operations",
    # Suggestions
    "ModelSuggestionSource",
    "SuggestionGenerator",
    "dashboard_suggestions",
    "interpreter_suggestions",
    "suggest",
    # Models
    "InterpretationResult",
    "Operation",
    "OperationType",
    "TaskSnapshot",
    # Exceptions
    "InterpreterError",
    "MalformedResponseError",
    "ServiceUnavailableError",
]
