"""Resolving natural-language task references against a snapshot."""

import re
from typing import Iterable

from .models import TaskSnapshot

_LEADING_FILLER = re.compile(r"^(?:the|my|a|an)\s+", re.IGNORECASE)
_TRAILING_TASK = re.compile(r"\s+task$", re.IGNORECASE)


def clean_search_term(term: str) -> str:
    """Drop quotes, a leading article and a trailing "task" from a reference."""
    cleaned = term.strip().strip("\"'“”‘’").strip()
    cleaned = _LEADING_FILLER.sub("", cleaned)
    cleaned = _TRAILING_TASK.sub("", cleaned)
    return cleaned.strip() or term.strip()


def fuzzy_match(tasks: Iterable[TaskSnapshot], term: str) -> list[TaskSnapshot]:
    """Tasks whose title or description contains ``term``, case-insensitively."""
    needle = term.lower()
    if not needle:
        return []
    return [
        t for t in tasks
        if needle in t.title.lower() or (t.description and needle in t.description.lower())
    ]


def find_tasks(tasks: Iterable[TaskSnapshot], term: str) -> list[TaskSnapshot]:
    """Resolve a reference, preferring exact title matches.

    Returns every task whose title equals ``term`` (ignoring case) when
    there is at least one; otherwise every fuzzy match. Ties are all kept.
    """
    tasks = list(tasks)
    needle = term.strip().lower()
    exact = [t for t in tasks if t.title.strip().lower() == needle]
    if exact:
        return exact
    return fuzzy_match(tasks, needle)


def describe_matches(matches: list[TaskSnapshot]) -> str:
    """'"Title"' for a single task, 'N tasks' otherwise."""
    if len(matches) == 1:
        return f'"{matches[0].title}"'
    return f"{len(matches)} tasks"
