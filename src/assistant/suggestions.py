"""Command suggestions derived from the current task snapshot.

Two local rule sets exist and differ on purpose: the dashboard path offers
"Delete completed tasks" once more than 3 tasks are done, while the
interpreter path waits for more than 10 and adds hints about undated and
high-priority work. ``SuggestionGenerator`` prefers model suggestions and
falls back to the interpreter rules.
"""

import json
import logging
from datetime import date
from typing import Optional, Sequence

from src.llm import LLMAdapter, LLMError, Message, OpenAIAdapter
from src.tasks.models import Priority, TaskStatus

from .models import TaskSnapshot
from .prompts import SUGGESTIONS_SYSTEM_PROMPT, SUGGESTIONS_USER_TEMPLATE, summarize_for_suggestions

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 4

ONBOARDING_SUGGESTIONS = [
    "Add task: Plan my week",
    "Add task: Review project proposal",
    "Create a high priority task",
]

DASHBOARD_COMPLETED_THRESHOLD = 3
INTERPRETER_COMPLETED_THRESHOLD = 10
UNDATED_THRESHOLD = 3
HIGH_PRIORITY_THRESHOLD = 5


def _overdue(tasks: Sequence[TaskSnapshot], today: date) -> list[TaskSnapshot]:
    return [t for t in tasks if not t.is_completed and t.due_date and t.due_date < today]


def _count_status(tasks: Sequence[TaskSnapshot], status: TaskStatus) -> int:
    return sum(1 for t in tasks if t.status == status)


def dashboard_suggestions(tasks: Sequence[TaskSnapshot], today: Optional[date] = None) -> list[str]:
    """Suggestions shown next to the task list.

    Args:
        tasks: Current snapshot.
        today: Reference date for overdue checks. Defaults to today.

    Returns:
        At most four short commands or hints.
    """
    if not tasks:
        return list(ONBOARDING_SUGGESTIONS)
    today = today or date.today()

    suggestions = []
    overdue = _overdue(tasks, today)
    if overdue:
        suggestions.append(f"You have {len(overdue)} overdue task(s)")
    if _count_status(tasks, TaskStatus.COMPLETED) > DASHBOARD_COMPLETED_THRESHOLD:
        suggestions.append("Delete completed tasks")
    if _count_status(tasks, TaskStatus.PENDING) > 0:
        suggestions.append("Complete all tasks")
    suggestions.append("Add a new task")
    return suggestions[:MAX_SUGGESTIONS]


def interpreter_suggestions(tasks: Sequence[TaskSnapshot], today: Optional[date] = None) -> list[str]:
    """Suggestions offered alongside command interpretation."""
    if not tasks:
        return list(ONBOARDING_SUGGESTIONS)
    today = today or date.today()

    suggestions = []
    overdue = _overdue(tasks, today)
    if overdue:
        suggestions.append(f"You have {len(overdue)} overdue task(s). Consider reviewing them.")

    open_tasks = [t for t in tasks if not t.is_completed]
    undated = [t for t in open_tasks if t.due_date is None]
    if len(undated) > UNDATED_THRESHOLD:
        suggestions.append(
            f"{len(undated)} tasks don't have due dates. Setting deadlines can help prioritize."
        )
    if sum(1 for t in open_tasks if t.priority == Priority.HIGH) > HIGH_PRIORITY_THRESHOLD:
        suggestions.append(
            "You have many high-priority tasks. Consider if all of them are truly urgent."
        )

    completed = _count_status(tasks, TaskStatus.COMPLETED)
    if completed > INTERPRETER_COMPLETED_THRESHOLD:
        suggestions.append(
            f'You have {completed} completed tasks. Say "delete all completed tasks" to clean up.'
        )
    if _count_status(tasks, TaskStatus.PENDING) > 0:
        suggestions.append("Complete all tasks")
    suggestions.append("Add a new task")
    return suggestions[:MAX_SUGGESTIONS]


class ModelSuggestionSource:
    """Asks the completion service for suggestions.

    ``suggest`` returns an empty list on any failure rather than raising.
    """

    def __init__(self, adapter: Optional[LLMAdapter] = None, temperature: float = 0.7, max_tokens: int = 200):
        self._adapter = adapter
        self._temperature = temperature
        self._max_tokens = max_tokens

    def _get_adapter(self) -> LLMAdapter:
        """Get LLM adapter, creating default if needed (lazy init)."""
        if self._adapter is None:
            self._adapter = OpenAIAdapter()
        return self._adapter

    def suggest(self, tasks: Sequence[TaskSnapshot]) -> list[str]:
        messages = [
            Message.system(SUGGESTIONS_SYSTEM_PROMPT),
            Message.user(SUGGESTIONS_USER_TEMPLATE.format(summary=summarize_for_suggestions(tasks))),
        ]
        try:
            response = self._get_adapter().complete(
                messages=messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                json_mode=True,
            )
            data = json.loads(response)
        except (LLMError, ValueError) as e:
            logger.warning("Model suggestions unavailable: %s", e)
            return []
        except Exception as e:
            logger.warning("Model suggestions failed unexpectedly: %s", e, exc_info=True)
            return []

        suggestions = data.get("suggestions") if isinstance(data, dict) else None
        if not isinstance(suggestions, list):
            logger.warning("Model suggestions payload has no 'suggestions' list")
            return []
        return [s.strip() for s in suggestions if isinstance(s, str) and s.strip()][:MAX_SUGGESTIONS]


class SuggestionGenerator:
    """Model suggestions when available, interpreter rules otherwise."""

    def __init__(self, source: Optional[ModelSuggestionSource] = None):
        self._source = source

    def get_suggestions(self, tasks: Sequence[TaskSnapshot], today: Optional[date] = None) -> list[str]:
        if self._source is not None:
            suggestions = self._source.suggest(tasks)
            if suggestions:
                return suggestions
        return interpreter_suggestions(tasks, today)


def suggest(tasks: Sequence[TaskSnapshot], today: Optional[date] = None) -> list[str]:
    """Deterministic suggestions for a snapshot (dashboard rules)."""
    return dashboard_suggestions(tasks, today)
