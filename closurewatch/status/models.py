"""Data models for the status pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StatusLabel(str, Enum):
    ONLINE_LEARNING_DAY = "OnlineLearningDay"
    CLOSED = "Closed"
    DELAYED = "Delayed"
    EARLY_DISMISSAL = "EarlyDismissal"
    WEATHER_ALERT = "WeatherAlert"
    ALERT = "Alert"
    OPEN = "Open"

    @property
    def display_name(self) -> str:
        """Human-readable label used in summary messages."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    StatusLabel.ONLINE_LEARNING_DAY: "Online Learning Day",
    StatusLabel.CLOSED: "Closed",
    StatusLabel.DELAYED: "Delayed",
    StatusLabel.EARLY_DISMISSAL: "Early Dismissal",
    StatusLabel.WEATHER_ALERT: "Weather Alert",
    StatusLabel.ALERT: "Alert",
    StatusLabel.OPEN: "Open",
}

# Status reported when the upstream page could not be fetched.
UNAVAILABLE_STATUS = "Status Unavailable"


@dataclass(frozen=True)
class Classification:
    """Outcome of keyword classification of one announcement."""

    is_alert: bool
    status: StatusLabel
    confidence: float


@dataclass(frozen=True)
class StatusResult:
    """The externally visible status record.

    ``status`` holds a :class:`StatusLabel` value, or :data:`UNAVAILABLE_STATUS`
    for the error shape.  ``target_date`` is an ISO date string.  The fields
    after ``confidence`` are filled in by the service once a fetch completes.
    """

    is_open: bool
    status: str
    message: str
    announcement: str
    target_date: str
    confidence: float
    last_updated: str = ""
    source: str = ""
    processing_time: str = ""
    verified: bool = True
    cached: bool = False
    stale: bool = False
