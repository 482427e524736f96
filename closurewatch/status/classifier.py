"""Keyword classification of school status announcements.

Rules are evaluated in order and the first match wins, so more specific
phrases ("online learning day", activities cancelled) must precede the broad
ones ("cancelled", "closed").
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from closurewatch.status.models import Classification, StatusLabel

# Text at least this long that matches no rule is still reported as an alert.
ALERT_MIN_LENGTH = 150
GENERIC_ALERT_CONFIDENCE = 0.75
NO_ALERT_CONFIDENCE = 0.90


@dataclass(frozen=True)
class ClassificationRule:
    pattern: re.Pattern[str]
    status: StatusLabel
    confidence: float


def _rule(pattern: str, status: StatusLabel, confidence: float) -> ClassificationRule:
    return ClassificationRule(re.compile(pattern, re.IGNORECASE | re.DOTALL), status, confidence)


_CANCELLED = r"\bcancell?ed\b"

DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    _rule(r"\bonline learning day\b", StatusLabel.ONLINE_LEARNING_DAY, 0.99),
    _rule(r"\bvirtual learning\b", StatusLabel.ONLINE_LEARNING_DAY, 0.95),
    _rule(r"\bremote learning\b", StatusLabel.ONLINE_LEARNING_DAY, 0.95),
    _rule(
        rf"\bschool activities\b.{{0,40}}?{_CANCELLED}|{_CANCELLED}.{{0,40}}?\bschool activities\b",
        StatusLabel.CLOSED,
        0.98,
    ),
    _rule(_CANCELLED, StatusLabel.CLOSED, 0.93),
    _rule(r"\bclos(?:ed|ures?)\b", StatusLabel.CLOSED, 0.92),
    _rule(r"\b(?:delay(?:ed|s)?|late start)\b", StatusLabel.DELAYED, 0.90),
    _rule(r"\bearly dismissal\b", StatusLabel.EARLY_DISMISSAL, 0.90),
    _rule(
        r"\b(?:inclement weather|winter weather|icy roads?|ice conditions|hazardous conditions)\b",
        StatusLabel.WEATHER_ALERT,
        0.88,
    ),
)


def classify(
    text: str,
    *,
    rules: Sequence[ClassificationRule] = DEFAULT_RULES,
    min_alert_length: int = ALERT_MIN_LENGTH,
) -> Classification:
    """Classify announcement *text* into a status with a confidence score.

    Never raises: text that matches no rule and is shorter than
    *min_alert_length* is simply "not an alert".
    """
    content = (text or "").strip()
    for rule in rules:
        if rule.pattern.search(content):
            return Classification(is_alert=True, status=rule.status, confidence=rule.confidence)

    if len(content) >= min_alert_length:
        return Classification(
            is_alert=True, status=StatusLabel.ALERT, confidence=GENERIC_ALERT_CONFIDENCE
        )
    return Classification(is_alert=False, status=StatusLabel.OPEN, confidence=NO_ALERT_CONFIDENCE)
