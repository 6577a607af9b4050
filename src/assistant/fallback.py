"""Deterministic, network-free command interpreter."""

import logging
import re
from datetime import date
from typing import Callable, Optional, Sequence

from src.tasks.models import Priority, TaskFields, TaskStatus

from .dates import resolve_due_date
from .matching import clean_search_term, describe_matches, find_tasks
from .models import InterpretationResult, Operation, TaskSnapshot
from .vocabulary import (
    ADD_PATTERNS,
    COMPLETE_ALL_PATTERN,
    COMPLETE_PATTERNS,
    DELETE_ALL_PATTERN,
    DELETE_COMPLETED_PATTERN,
    DELETE_PATTERNS,
    HELP_MESSAGE,
    LIST_SEPARATOR,
    MULTI_ADD_PATTERN,
    PRIORITIZE_PATTERNS,
    SET_PRIORITY_PATTERNS,
    SORT_PATTERN,
    TRAILING_PRIORITY,
    URGENT_DUE_WITHIN_DAYS,
    detect_priority,
    parse_priority_word,
)

logger = logging.getLogger(__name__)

Rule = Callable[["FallbackInterpreter", str, Sequence[TaskSnapshot], date], Optional[InterpretationResult]]

_PRIORITY_ORDER = (Priority.HIGH, Priority.MEDIUM, Priority.LOW)
_WORD = re.compile(r"\w")

MISSING_TITLE_MESSAGE = 'Please tell me what the task is, for example "Add task: Buy groceries".'


def capitalize_first(text: str) -> str:
    """Upper-case the first character only."""
    return text[:1].upper() + text[1:]


def _first_match(patterns: Sequence[re.Pattern], command: str) -> Optional[re.Match]:
    for pattern in patterns:
        match = pattern.match(command)
        if match:
            return match
    return None


def _has_words(text: str) -> bool:
    return bool(_WORD.search(text))


def _not_found(term: str) -> InterpretationResult:
    return InterpretationResult.failure(f'I couldn\'t find any task matching "{term}".')


class FallbackInterpreter:
    """Pattern-based interpreter used when the model path is unavailable.

    Rules are tried in order and the first one that recognizes the command
    wins. Blanket bulk phrasings ("complete all tasks", "delete completed
    tasks") are checked before the rules that resolve a specific task
    reference, so "all" is never fuzzy-matched against titles.

    The result depends only on the command, the snapshot and ``today``.
    Unlike the model path, a planning request such as "Plan my week" becomes
    one task with that title; only the model expands plans into subtasks.
    """

    # -------------------- Add --------------------

    def _match_multi_add(self, command, tasks, today):
        match = MULTI_ADD_PATTERN.match(command)
        if not match:
            return None
        titles = [t.strip().strip("\"'") for t in LIST_SEPARATOR.split(match.group("items"))]
        titles = [capitalize_first(t) for t in titles if _has_words(t)]
        if not titles:
            return None

        new_tasks = [
            TaskFields(
                title=title,
                description="",
                status=TaskStatus.PENDING,
                priority=Priority.MEDIUM,
            )
            for title in titles
        ]
        return InterpretationResult.ok(
            f"I'll add {len(new_tasks)} tasks for you.",
            [Operation.add(new_tasks, f"Adding {len(new_tasks)} tasks")],
        )

    def _match_add(self, command, tasks, today):
        match = _first_match(ADD_PATTERNS, command)
        if not match:
            return None

        title = capitalize_first(match.group("title").strip())
        if not _has_words(title):
            return InterpretationResult.failure(MISSING_TITLE_MESSAGE)
        explicit = match.group("priority") or match.group("priority_alt")
        due_text = match.group("due")

        if due_text and not explicit:
            trailing = TRAILING_PRIORITY.search(due_text)
            if trailing:
                explicit = trailing.group("priority") or trailing.group("priority_alt")
                due_text = due_text[: trailing.start()]

        priority = parse_priority_word(explicit) if explicit else detect_priority(command)
        due_date = resolve_due_date(due_text, today) if due_text else None

        fields = TaskFields(
            title=title,
            description="",
            status=TaskStatus.PENDING,
            priority=priority,
            due_date=due_date,
        )
        return InterpretationResult.ok(
            f'I\'ll add the task "{title}" for you.',
            [Operation.add([fields], f'Adding task: "{title}"')],
        )

    # -------------------- Complete --------------------

    def _match_complete_all(self, command, tasks, today):
        if not COMPLETE_ALL_PATTERN.match(command):
            return None
        incomplete = [t for t in tasks if not t.is_completed]
        if not incomplete:
            return InterpretationResult.failure("All tasks are already completed!")
        return InterpretationResult.ok(
            f"I'll mark {len(incomplete)} task(s) as completed.",
            [
                Operation.bulk_update(
                    [t.id for t in incomplete],
                    TaskFields(status=TaskStatus.COMPLETED),
                    f"Completing {len(incomplete)} tasks",
                )
            ],
        )

    def _match_complete(self, command, tasks, today):
        match = _first_match(COMPLETE_PATTERNS, command)
        if not match:
            return None
        term = clean_search_term(match.group("term"))
        matches = find_tasks(tasks, term)
        if not matches:
            return _not_found(term)
        return InterpretationResult.ok(
            f"I'll mark {describe_matches(matches)} as completed.",
            [Operation.complete([t.id for t in matches], f"Completing {len(matches)} task(s)")],
        )

    # -------------------- Delete --------------------

    def _match_delete_completed(self, command, tasks, today):
        if not DELETE_COMPLETED_PATTERN.match(command):
            return None
        completed = [t for t in tasks if t.is_completed]
        if not completed:
            return InterpretationResult.failure("There are no completed tasks to delete.")
        return InterpretationResult.ok(
            f"I'll delete {len(completed)} completed task(s).",
            [
                Operation.bulk_delete(
                    [t.id for t in completed],
                    f"Deleting {len(completed)} completed tasks",
                )
            ],
        )

    def _match_delete_all(self, command, tasks, today):
        if not DELETE_ALL_PATTERN.match(command):
            return None
        if not tasks:
            return InterpretationResult.failure("There are no tasks to delete.")
        return InterpretationResult.ok(
            f"I'll delete all {len(tasks)} task(s).",
            [Operation.bulk_delete([t.id for t in tasks], f"Deleting all {len(tasks)} task(s)")],
        )

    def _match_delete(self, command, tasks, today):
        match = _first_match(DELETE_PATTERNS, command)
        if not match:
            return None
        term = clean_search_term(match.group("term"))
        matches = find_tasks(tasks, term)
        if not matches:
            return _not_found(term)
        return InterpretationResult.ok(
            f"I'll delete {describe_matches(matches)}.",
            [Operation.delete([t.id for t in matches], f"Deleting {len(matches)} task(s)")],
        )

    # -------------------- Priority --------------------

    def _match_set_priority(self, command, tasks, today):
        match = _first_match(SET_PRIORITY_PATTERNS, command)
        if not match:
            return None
        term = clean_search_term(match.group("term"))
        priority = parse_priority_word(match.group("level"))
        matches = find_tasks(tasks, term)
        if not matches:
            return _not_found(term)
        return InterpretationResult.ok(
            f"I'll set the priority of {describe_matches(matches)} to {priority.value}.",
            [
                Operation.bulk_update(
                    [t.id for t in matches],
                    TaskFields(priority=priority),
                    f"Updating priority to {priority.value}",
                )
            ],
        )

    def _match_prioritize(self, command, tasks, today):
        if not _first_match(PRIORITIZE_PATTERNS, command):
            return None
        open_tasks = [t for t in tasks if not t.is_completed]
        if not open_tasks:
            return InterpretationResult.failure("There are no open tasks to prioritize.")

        changes: dict[Priority, list[tuple[TaskSnapshot, str]]] = {}
        for task in open_tasks:
            priority, reason = rank_task(task, today)
            if priority != task.priority:
                changes.setdefault(priority, []).append((task, reason))

        if not changes:
            return InterpretationResult.ok(
                "Your tasks are already prioritized by their deadlines and urgency."
            )

        operations = []
        explanations = []
        for priority in _PRIORITY_ORDER:
            ranked = changes.get(priority)
            if not ranked:
                continue
            operations.append(
                Operation.bulk_update(
                    [t.id for t, _ in ranked],
                    TaskFields(priority=priority),
                    f"Setting {len(ranked)} task(s) to {priority.value} priority",
                )
            )
            details = "; ".join(f'"{t.title}" ({reason})' for t, reason in ranked)
            explanations.append(f"{priority.value.capitalize()}: {details}.")

        changed = sum(len(v) for v in changes.values())
        message = f"I re-prioritized {changed} task(s). " + " ".join(explanations)
        return InterpretationResult.ok(message, operations)

    # -------------------- View --------------------

    def _match_sort(self, command, tasks, today):
        match = SORT_PATTERN.match(command)
        if not match:
            return None
        sort_field = match.group("field").strip().lower()
        return InterpretationResult.ok(
            f"I'll sort your tasks by {sort_field}. "
            "Use the sort control in the task list to apply this order."
        )

    # -------------------- Catch-all --------------------

    def _match_as_new_task(self, command, tasks, today):
        if len(command) <= 2 or "?" in command:
            return None
        title = capitalize_first(command)
        fields = TaskFields(
            title=title,
            description="",
            status=TaskStatus.PENDING,
            priority=detect_priority(command),
        )
        return InterpretationResult.ok(
            f'I\'ll add "{title}" as a new task. If this wasn\'t what you meant, '
            'try using commands like "add task", "complete task", or "delete task".',
            [Operation.add([fields], f'Adding task: "{title}"')],
        )

    _RULES: tuple[Rule, ...] = (
        _match_multi_add,
        _match_add,
        _match_complete_all,
        _match_complete,
        _match_delete_completed,
        _match_delete_all,
        _match_delete,
        _match_set_priority,
        _match_prioritize,
        _match_sort,
        _match_as_new_task,
    )

    def interpret(
        self,
        command: str,
        tasks: Sequence[TaskSnapshot],
        today: Optional[date] = None,
    ) -> InterpretationResult:
        """Map a command to operations using the fixed rule table.

        Args:
            command: Raw user text.
            tasks: Current snapshot.
            today: Reference date for relative due dates and urgency.
                Defaults to the current date.

        Returns:
            The first matching rule's result, or a help message.
        """
        today = today or date.today()
        text = command.strip()
        for rule in self._RULES:
            result = rule(self, text, tasks, today)
            if result is not None:
                logger.debug("Fallback rule %s matched %r", rule.__name__, text)
                return result
        return InterpretationResult.failure(HELP_MESSAGE)


def rank_task(task: TaskSnapshot, today: date) -> tuple[Priority, str]:
    """Priority a task deserves from its deadline and wording, with a reason."""
    if task.due_date is not None:
        days_left = (task.due_date - today).days
        if days_left < 0:
            return Priority.HIGH, "overdue"
        if days_left <= URGENT_DUE_WITHIN_DAYS:
            return Priority.HIGH, f"due {task.due_date.isoformat()}"

    cue = detect_priority(f"{task.title} {task.description or ''}")
    if cue == Priority.HIGH:
        return Priority.HIGH, "marked as urgent"
    if cue == Priority.LOW:
        return Priority.LOW, "can wait"
    return Priority.MEDIUM, "no deadline pressure"
