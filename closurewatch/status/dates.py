"""Calendar helpers: target-date extraction and school-day resolution."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Iterator, Optional

_MONTHS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sept": 9, "sep": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}
_MONTH_ALTERNATION = "|".join(sorted(_MONTHS, key=len, reverse=True))
_WEEKDAYS = "monday|tuesday|wednesday|thursday|friday|saturday|sunday"

# "Tuesday, January 27th, 2026", "Jan. 27", "January 27"
_NAMED_DATE = re.compile(
    rf"\b(?:(?:{_WEEKDAYS}),?\s+)?({_MONTH_ALTERNATION})\.?\s+(\d{{1,2}})(?:st|nd|rd|th)?\b"
    r"(?:,?\s+(\d{4})\b)?",
    re.IGNORECASE,
)
# "1/27/2026"
_NUMERIC_DATE = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")

_SATURDAY = 5
_SUNDAY = 6


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _candidates(text: str, reference: date) -> Iterator[date]:
    for match in _NAMED_DATE.finditer(text):
        month = _MONTHS[match.group(1).lower()]
        day = int(match.group(2))
        if match.group(3):
            candidate = _safe_date(int(match.group(3)), month, day)
        else:
            # No year given: this year, unless that date has already passed.
            candidate = _safe_date(reference.year, month, day)
            if candidate is not None and candidate < reference:
                candidate = _safe_date(reference.year + 1, month, day)
        if candidate is not None:
            yield candidate

    for match in _NUMERIC_DATE.finditer(text):
        candidate = _safe_date(int(match.group(3)), int(match.group(1)), int(match.group(2)))
        if candidate is not None:
            yield candidate


def extract_target_date(text: str, reference: date | datetime) -> Optional[date]:
    """Return the earliest date mentioned in *text* that is on or after *reference*.

    Named-month dates without a year are placed in the reference year, or the
    following one if already past.  Dates with an explicit year are taken as
    written.  Returns ``None`` when no mention qualifies.
    """
    ref = _as_date(reference)
    upcoming = [d for d in _candidates(text or "", ref) if d >= ref]
    return min(upcoming) if upcoming else None


def relevant_school_day(now: date | datetime) -> date:
    """Return the school day a status check made at *now* is about.

    Weekends roll forward to the following Monday.
    """
    today = _as_date(now)
    weekday = today.weekday()
    if weekday == _SATURDAY:
        return today + timedelta(days=2)
    if weekday == _SUNDAY:
        return today + timedelta(days=1)
    return today


def is_weekend(day: date | datetime) -> bool:
    return _as_date(day).weekday() >= _SATURDAY


def format_long_date(day: date) -> str:
    """Format *day* as e.g. ``Tuesday, January 27, 2026``."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"
