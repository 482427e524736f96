"""Status package: announcement classification, date resolution and caching."""

from closurewatch.status.classifier import classify
from closurewatch.status.dates import extract_target_date, format_long_date, relevant_school_day
from closurewatch.status.models import Classification, StatusLabel, StatusResult
from closurewatch.status.service import StatusService, build_status
from closurewatch.status.summary import compose, make_excerpt

__all__ = [
    "classify",
    "extract_target_date",
    "relevant_school_day",
    "format_long_date",
    "compose",
    "make_excerpt",
    "build_status",
    "StatusService",
    "Classification",
    "StatusLabel",
    "StatusResult",
]
