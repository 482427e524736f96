"""Status orchestration: fetch → normalise → classify → compose, behind a cache.

:class:`StatusService` owns the only mutable state in the pipeline, the last
good :class:`StatusResult`.  Its fetcher and clock are injected so the cache
can be driven without a network or a wall clock.

Failure policy
--------------
A failed refresh never replaces the cached value.  When a last-good result
exists it is served again with ``stale=True``; otherwise the caller gets the
"Status Unavailable" error shape with ``verified=False``.
"""

from __future__ import annotations

import threading
import time
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional, Sequence, Tuple

from closurewatch.config import Settings, settings as default_settings
from closurewatch.log import get_logger
from closurewatch.scraper.extractor import normalize_html, select_announcement
from closurewatch.scraper.fetcher import FetchError, fetch_status_page
from closurewatch.scraper.models import RawPage
from closurewatch.status.classifier import ALERT_MIN_LENGTH, DEFAULT_RULES, ClassificationRule, classify
from closurewatch.status.dates import extract_target_date, relevant_school_day
from closurewatch.status.models import UNAVAILABLE_STATUS, StatusResult
from closurewatch.status.summary import EXCERPT_MAX_CHARS, compose

logger = get_logger("closurewatch.status.service")

UNAVAILABLE_MESSAGE = "Service temporarily unavailable. Please try again later."

Fetcher = Callable[[], RawPage]
Clock = Callable[[], datetime]


# ---------------------------------------------------------------------------
# Pure pipeline
# ---------------------------------------------------------------------------

def build_status(
    html: str,
    now: date | datetime,
    *,
    selector: Optional[str] = None,
    source: str = "",
    rules: Sequence[ClassificationRule] = DEFAULT_RULES,
    min_alert_length: int = ALERT_MIN_LENGTH,
    excerpt_max_chars: int = EXCERPT_MAX_CHARS,
) -> StatusResult:
    """Run the whole classification pipeline over one HTML document.

    Deterministic for identical *html* and *now*.
    """
    text = normalize_html(select_announcement(html, selector))
    classification = classify(text, rules=rules, min_alert_length=min_alert_length)
    target = extract_target_date(text, now)
    resolver_date = relevant_school_day(now)
    result = compose(
        classification,
        target,
        resolver_date,
        now,
        text,
        excerpt_max_chars=excerpt_max_chars,
    )
    return replace(result, source=source)


def unavailable_result(now: datetime, source: str, processing_time: str) -> StatusResult:
    """The error-shaped result returned when no status can be produced."""
    return StatusResult(
        is_open=False,
        status=UNAVAILABLE_STATUS,
        message=UNAVAILABLE_MESSAGE,
        announcement="",
        target_date=relevant_school_day(now).isoformat(),
        confidence=0.0,
        last_updated=now.isoformat(),
        source=source,
        processing_time=processing_time,
        verified=False,
    )


def _elapsed(started: float) -> str:
    return f"{round((time.perf_counter() - started) * 1000)}ms"


# ---------------------------------------------------------------------------
# Cached service
# ---------------------------------------------------------------------------

class StatusService:
    """Serve the district status, refreshing it at most once per cache window.

    Refreshes are single-flight: concurrent callers that find the cache
    expired queue on one lock and all but the first are answered from the
    value it stores.
    """

    def __init__(
        self,
        fetcher: Optional[Fetcher] = None,
        clock: Optional[Clock] = None,
        config: Optional[Settings] = None,
    ) -> None:
        self._settings = config or default_settings
        self._fetcher = fetcher or self._fetch_live
        self._clock = clock or self._local_now
        self._lock = threading.Lock()
        # (result, stored_at), replaced as a whole
        self._entry: Optional[Tuple[StatusResult, datetime]] = None

    def _local_now(self) -> datetime:
        return datetime.now(self._settings.tz)

    def _fetch_live(self) -> RawPage:
        cfg = self._settings
        return fetch_status_page(
            cfg.status_url,
            timeout=cfg.request_timeout,
            max_bytes=cfg.max_response_bytes,
            user_agent=cfg.user_agent,
        )

    def _fresh(self, now: datetime) -> Optional[StatusResult]:
        entry = self._entry
        if entry is None:
            return None
        result, stored_at = entry
        age = (now - stored_at).total_seconds()
        if 0 <= age < self._settings.cache_ttl:
            return result
        return None

    def get_status(self) -> StatusResult:
        """Return the current status.  Never raises."""
        hit = self._fresh(self._clock())
        if hit is None:
            with self._lock:
                now = self._clock()
                hit = self._fresh(now)
                if hit is None:
                    return self._refresh(now)
        logger.debug("Serving cached status from %s", hit.last_updated)
        return replace(hit, cached=True)

    def _refresh(self, now: datetime) -> StatusResult:
        cfg = self._settings
        started = time.perf_counter()
        try:
            raw = self._fetcher()
            result = build_status(
                raw.html,
                now,
                selector=cfg.announcement_selector or None,
                source=cfg.source_name,
                min_alert_length=cfg.alert_min_length,
                excerpt_max_chars=cfg.excerpt_max_chars,
            )
        except FetchError as exc:
            logger.warning("Status page fetch failed: %s", exc)
            return self._fallback(now, started)
        except Exception:
            logger.exception("Status pipeline failed")
            return self._fallback(now, started)

        result = replace(result, last_updated=now.isoformat(), processing_time=_elapsed(started))
        self._entry = (result, now)
        logger.info(
            "Status refreshed: %s (confidence %.2f, target %s)",
            result.status,
            result.confidence,
            result.target_date,
        )
        return result

    def _fallback(self, now: datetime, started: float) -> StatusResult:
        entry = self._entry
        if entry is not None:
            last_good = entry[0]
            logger.warning("Serving stale status from %s", last_good.last_updated)
            return replace(last_good, cached=True, stale=True)
        return unavailable_result(now, self._settings.source_name, _elapsed(started))
