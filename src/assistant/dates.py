"""Resolution of relative and free-form due-date phrases."""

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Optional

from .vocabulary import WEEKDAYS

_IN_N_UNITS = re.compile(r"^in\s+(\d{1,3})\s+(day|days|week|weeks)$")
_WEEKDAY = re.compile(r"^(?:(?:next|this|on)\s+)?(%s)$" % "|".join(WEEKDAYS))

# Tried in order after the relative phrases.
_DATE_FORMATS = (
    "%m/%d/%Y",
    "%B %d, %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
)
_YEARLESS_FORMATS = ("%B %d", "%b %d", "%d %B", "%d %b")


def add_months(day: date, months: int) -> date:
    """Shift by calendar months, clamping to the last day of the target month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def next_weekday(today: date, weekday: int) -> date:
    """Next date falling on ``weekday`` (0 = Monday), strictly after today."""
    days_ahead = (weekday - today.weekday()) % 7 or 7
    return today + timedelta(days=days_ahead)


def resolve_due_date(text: Optional[str], today: date) -> Optional[date]:
    """Turn a due-date phrase into a calendar date.

    Understands ``today``, ``tomorrow``, ``next week``, ``next month``,
    weekday names, ``in N days/weeks`` and a handful of absolute formats.
    Anything else resolves to None.

    Args:
        text: The phrase after "due", e.g. "next friday" or "2026-03-01".
        today: The reference date for relative phrases.
    """
    if not text:
        return None
    phrase = " ".join(text.strip().strip(".!").lower().split())
    if not phrase:
        return None

    if phrase == "today":
        return today
    if phrase == "tomorrow":
        return today + timedelta(days=1)
    if "next week" in phrase:
        return today + timedelta(days=7)
    if "next month" in phrase:
        return add_months(today, 1)

    match = _WEEKDAY.match(phrase)
    if match:
        return next_weekday(today, WEEKDAYS.index(match.group(1)))

    match = _IN_N_UNITS.match(phrase)
    if match:
        amount = int(match.group(1))
        days = amount * 7 if match.group(2).startswith("week") else amount
        return today + timedelta(days=days)

    return parse_date(phrase, today)


def parse_date(text: str, today: date) -> Optional[date]:
    """Parse an absolute date, or None when no known format fits.

    Year-less dates ("march 3") land in the current year.
    """
    candidate = text.strip()
    try:
        return date.fromisoformat(candidate)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(candidate.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    # Ordinal suffixes: "march 3rd" -> "march 3"
    candidate = re.sub(r"(\d+)(?:st|nd|rd|th)\b", r"\1", candidate)

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue
    for fmt in _YEARLESS_FORMATS:
        try:
            parsed = datetime.strptime(f"{candidate} {today.year}", f"{fmt} %Y")
        except ValueError:
            continue
        return parsed.date()
    return None
