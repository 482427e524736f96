"""Composition of the human-readable status message."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from closurewatch.status.dates import format_long_date, is_weekend
from closurewatch.status.models import Classification, StatusResult

EXCERPT_MAX_CHARS = 240
OPEN_MESSAGE = "Open / Normal schedule"

# A sentence boundary is only used as the cut point past this share of the limit.
_SENTENCE_CUT_RATIO = 0.6
_SENTENCE_ENDS = (". ", "! ", "? ")
_ELLIPSIS = "…"


def make_excerpt(text: str, max_chars: int = EXCERPT_MAX_CHARS) -> str:
    """Collapse whitespace in *text* and bound it to about *max_chars*.

    Long text is cut after the last sentence ending past 60% of the limit when
    there is one, otherwise at the limit itself, and an ellipsis is appended.
    """
    collapsed = " ".join((text or "").split())
    if len(collapsed) <= max_chars:
        return collapsed

    # One extra char so a sentence ending right at the limit still counts.
    window = collapsed[: max_chars + 1]
    boundary = max(window.rfind(end) for end in _SENTENCE_ENDS)
    if boundary >= int(max_chars * _SENTENCE_CUT_RATIO):
        return f"{collapsed[: boundary + 1]} {_ELLIPSIS}"
    return f"{collapsed[:max_chars].rstrip()}{_ELLIPSIS}"


def summary_prefix(now: date | datetime, effective_date: date, resolver_date: date) -> str:
    today = now.date() if isinstance(now, datetime) else now
    if is_weekend(today):
        return "Next school day" if effective_date == resolver_date else "Upcoming"
    return "Today" if effective_date == today else "Upcoming"


def compose(
    classification: Classification,
    target_date: Optional[date],
    resolver_date: date,
    now: date | datetime,
    announcement: str,
    *,
    excerpt_max_chars: int = EXCERPT_MAX_CHARS,
) -> StatusResult:
    """Build the status record for one classified announcement.

    The date found in the announcement wins over the resolved school day.
    Fetch metadata (``last_updated``, ``source``, ...) is left at its defaults.
    """
    effective = target_date or resolver_date
    heading = f"{summary_prefix(now, effective, resolver_date)} ({format_long_date(effective)})"

    if classification.is_alert:
        message = f"{heading}: {classification.status.display_name}"
        excerpt = make_excerpt(announcement, excerpt_max_chars)
        if excerpt:
            message = f"{message}\n{excerpt}"
    else:
        message = f"{heading}: {OPEN_MESSAGE}"

    return StatusResult(
        is_open=not classification.is_alert,
        status=classification.status.value,
        message=message,
        announcement=announcement,
        target_date=effective.isoformat(),
        confidence=classification.confidence,
    )
