"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class RawPage:
    """The raw HTTP response for one fetch of the status page."""

    url: str
    html: str
    status_code: int
    size: int
    fetched_at: datetime
