"""Scraper package: status page fetch & HTML-to-text normalisation."""

from closurewatch.scraper.extractor import normalize_html, select_announcement
from closurewatch.scraper.fetcher import FetchError, ResponseTooLargeError, fetch_status_page
from closurewatch.scraper.models import RawPage

__all__ = [
    "fetch_status_page",
    "normalize_html",
    "select_announcement",
    "FetchError",
    "ResponseTooLargeError",
    "RawPage",
]
