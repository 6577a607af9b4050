"""Lexical cues and command patterns shared by both interpreters.

The model instructions in ``prompts.py`` are rendered from the same tables
the fallback interpreter matches against, so the two paths cannot drift
apart on which words mean what.

All command patterns are matched against the stripped, original-case
command with ``re.IGNORECASE``; captured titles keep the user's casing.
"""

import re

from src.tasks.models import Priority

# -------------------- Priority cues --------------------

HIGH_PRIORITY_CUES = ("urgent", "asap", "important", "critical")
LOW_PRIORITY_CUES = ("later", "someday", "eventually", "whenever")

# Words accepted as an explicit level in "with <word> priority" and
# "set X to <word> priority".
PRIORITY_LEVEL_WORDS: dict[str, Priority] = {
    "high": Priority.HIGH,
    "urgent": Priority.HIGH,
    "important": Priority.HIGH,
    "critical": Priority.HIGH,
    "medium": Priority.MEDIUM,
    "normal": Priority.MEDIUM,
    "low": Priority.LOW,
    "minor": Priority.LOW,
}


def detect_priority(text: str) -> Priority:
    """Infer a priority from urgency or deferral cues anywhere in ``text``.

    Cues match as case-insensitive substrings, so "urgently" counts as
    "urgent". High cues win over low cues when both appear.
    """
    lowered = text.lower()
    if any(cue in lowered for cue in HIGH_PRIORITY_CUES):
        return Priority.HIGH
    if any(cue in lowered for cue in LOW_PRIORITY_CUES):
        return Priority.LOW
    return Priority.MEDIUM


def parse_priority_word(word: str) -> Priority:
    """Map an explicit level word to a priority, medium when unrecognized."""
    return PRIORITY_LEVEL_WORDS.get(word.strip().lower(), Priority.MEDIUM)


# -------------------- Dates --------------------

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
RELATIVE_DATE_PHRASES = ("today", "tomorrow", "next week", "next month") + WEEKDAYS

# Open tasks due within this many days count as urgent when prioritizing.
URGENT_DUE_WITHIN_DAYS = 2

# -------------------- Planning --------------------

PLANNING_PHRASES = ("plan", "break down", "create a plan for", "help me plan")
PLAN_SUBTASKS_MIN = 4
PLAN_SUBTASKS_MAX = 7

PRIORITIZE_PHRASES = (
    "prioritize",
    "sort by priority",
    "what should I focus on",
    "order by importance",
    "help me prioritize",
)

# -------------------- Command patterns --------------------

_Q = r"[\"'“”‘’]?"
_LEVELS = "|".join(PRIORITY_LEVEL_WORDS)
_FLAGS = re.IGNORECASE

# "with high priority" / "with a priority of high" / "due <phrase>"
_ADD_SUFFIX = (
    r"(?:\s+with\s+(?:a\s+)?(?:(?P<priority>\w+)\s+priority"
    r"|priority\s+(?:of\s+)?(?P<priority_alt>\w+)))?"
    r"(?:\s+due\s+(?:on\s+|by\s+)?(?P<due>.+?))?"
)

MULTI_ADD_PATTERN = re.compile(
    r"^(?:add|create)\s+(?:these\s+|the\s+following\s+)?tasks(?:\s*:\s*|\s+)(?P<items>.+)$",
    _FLAGS,
)
LIST_SEPARATOR = re.compile(r"\s*,\s*(?:and\s+)?|\s+and\s+", _FLAGS)

ADD_PATTERNS = (
    re.compile(
        r"^(?:add|create)\s+(?:a\s+)?(?:new\s+)?"
        r"(?:task\b\s*(?:called\s+|named\s+)?)?:?\s*"
        + _Q + r"(?P<title>.+?)" + _Q + _ADD_SUFFIX + r"$",
        _FLAGS,
    ),
    re.compile(
        r"^new\s+task\b\s*:?\s*" + _Q + r"(?P<title>.+?)" + _Q + _ADD_SUFFIX + r"$",
        _FLAGS,
    ),
    re.compile(
        r"^(?:i\s+need\s+to|remind\s+me\s+to)\s+(?P<title>.+?)" + _ADD_SUFFIX + r"$",
        _FLAGS,
    ),
)

# Trailing "with <level> priority" left inside a due phrase
# ("due friday with high priority").
TRAILING_PRIORITY = re.compile(
    r"\s+with\s+(?:a\s+)?(?:(?P<priority>\w+)\s+priority|priority\s+(?:of\s+)?(?P<priority_alt>\w+))$",
    _FLAGS,
)

COMPLETE_ALL_PATTERN = re.compile(
    r"^(?:complete|finish|mark)\s+(?:off\s+)?all"
    r"(?:\s+(?:of\s+)?(?:my\s+|the\s+)?tasks?)?"
    r"(?:\s+as\s+(?:done|complete|completed|finished))?[.!]?$",
    _FLAGS,
)

COMPLETE_PATTERNS = (
    re.compile(
        r"^mark\s+(?:task\s+)?" + _Q + r"(?P<term>.+?)" + _Q
        + r"\s+as\s+(?:done|complete|completed|finished)$",
        _FLAGS,
    ),
    re.compile(
        r"^(?:i\s+)?(?:finished|completed|done\s+with)\s+" + _Q + r"(?P<term>.+?)" + _Q + r"$",
        _FLAGS,
    ),
    re.compile(
        r"^(?:complete|finish|done|mark\s+(?:as\s+)?(?:complete|completed|done|finished))\s+"
        r"(?:task\s+)?" + _Q + r"(?P<term>.+?)" + _Q + r"$",
        _FLAGS,
    ),
)

DELETE_COMPLETED_PATTERN = re.compile(
    r"^(?:delete|remove|clear|clean\s+up)\s+(?:all\s+)?(?:of\s+)?(?:my\s+|the\s+)?"
    r"(?:completed|finished|done)(?:\s+tasks?)?[.!]?$",
    _FLAGS,
)

DELETE_ALL_PATTERN = re.compile(
    r"^(?:delete|remove|clear)\s+(?:all|everything)"
    r"(?:\s+(?:of\s+)?(?:my\s+|the\s+)?tasks?)?[.!]?$",
    _FLAGS,
)

DELETE_PATTERNS = (
    re.compile(r"^(?:delete|remove|cancel)\s+(?:task\s+)?" + _Q + r"(?P<term>.+?)" + _Q + r"$", _FLAGS),
    re.compile(r"^(?:get\s+rid\s+of|drop)\s+" + _Q + r"(?P<term>.+?)" + _Q + r"$", _FLAGS),
)

SET_PRIORITY_PATTERNS = (
    re.compile(
        r"^(?:set|change|make|mark)\s+(?:the\s+)?(?:priority\s+(?:of\s+|for\s+)?)?"
        + _Q + r"(?P<term>.+?)" + _Q + r"(?:'s)?(?:\s+priority)?\s+"
        r"(?:to\s+|as\s+)?(?:a\s+)?(?P<level>" + _LEVELS + r")(?:\s+priority)?$",
        _FLAGS,
    ),
)

PRIORITIZE_PATTERNS = (
    re.compile(
        r"^(?:please\s+)?(?:help\s+me\s+)?prioriti[sz]e"
        r"(?:\s+(?:my|the|all|all\s+my)?\s*(?:tasks?|list|work|day|week))?[.!?]?$",
        _FLAGS,
    ),
    re.compile(r"^what\s+should\s+i\s+(?:focus\s+on|do\s+first|work\s+on)\b.*$", _FLAGS),
    re.compile(
        r"^(?:sort|order|rank)\s+(?:my\s+|the\s+)?(?:tasks?\s+)?by\s+(?:importance|urgency|priority)[.!]?$",
        _FLAGS,
    ),
)

SORT_PATTERN = re.compile(
    r"^(?:sort|organi[sz]e|order|arrange)\s+(?:my\s+|the\s+)?(?:tasks?\s+)?by\s+(?P<field>[\w -]+?)[.!]?$",
    _FLAGS,
)

HELP_MESSAGE = (
    "I couldn't understand that command. Try:\n"
    '• "Add task: Buy groceries"\n'
    '• "Complete meeting notes"\n'
    '• "Delete old task"\n'
    '• "Set priority of report to high"\n'
    '• "Delete all completed tasks"'
)
