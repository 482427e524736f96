"""Tests for the status pipeline and its cached service.

The service is driven by a fake clock and a fake fetcher, so no network or
wall-clock time is involved.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Callable, List, Optional

import pytest

from closurewatch.config import Settings
from closurewatch.scraper.fetcher import FetchError, ResponseTooLargeError
from closurewatch.scraper.models import RawPage
from closurewatch.status.models import UNAVAILABLE_STATUS
from closurewatch.status.service import StatusService, build_status


# ---------------------------------------------------------------------------
# Fixtures / helpers
# ---------------------------------------------------------------------------

_TUESDAY = datetime(2026, 1, 20, 7, 0)

_ONLINE_HTML = """\
<html><body>
<div class="page-pop">
  <h2>Weather Update</h2>
  <p>Due to icy roads, Tuesday, January 27 will be an Online Learning Day for all students.</p>
</div>
<footer>Forsyth County Schools</footer>
</body></html>
"""

_QUIET_HTML = "<html><body><p>Welcome back!</p></body></html>"


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeFetcher:
    """Returns queued pages (or raises queued errors) and counts calls."""

    def __init__(self, *outcomes: object) -> None:
        self._outcomes: List[object] = list(outcomes)
        self.calls = 0

    def __call__(self) -> RawPage:
        self.calls += 1
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return RawPage(
            url="https://district.example/",
            html=str(outcome),
            status_code=200,
            size=len(str(outcome)),
            fetched_at=_TUESDAY,
        )


def _settings(**overrides: object) -> Settings:
    values = dict(
        cache_ttl=300.0,
        source_name="Test District",
        announcement_selector="",
        alert_min_length=150,
        excerpt_max_chars=240,
    )
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]


def _service(
    fetcher: Callable[[], RawPage],
    clock: Optional[FakeClock] = None,
    **overrides: object,
) -> StatusService:
    return StatusService(fetcher=fetcher, clock=clock or FakeClock(_TUESDAY), config=_settings(**overrides))


# ---------------------------------------------------------------------------
# build_status
# ---------------------------------------------------------------------------

class TestBuildStatus:
    def test_online_learning_day_page(self) -> None:
        result = build_status(_ONLINE_HTML, _TUESDAY, source="Test District")
        assert result.status == "OnlineLearningDay"
        assert result.is_open is False
        assert result.confidence == 0.99
        assert result.target_date == "2026-01-27"
        assert result.message.startswith(
            "Upcoming (Tuesday, January 27, 2026): Online Learning Day\n"
        )
        assert result.source == "Test District"

    def test_quiet_page_is_open_today(self) -> None:
        result = build_status(_QUIET_HTML, _TUESDAY)
        assert result.is_open is True
        assert result.status == "Open"
        assert result.target_date == "2026-01-20"
        assert result.message == "Today (Tuesday, January 20, 2026): Open / Normal schedule"

    def test_weekend_check_targets_monday(self) -> None:
        saturday = datetime(2026, 1, 24, 10, 0)
        result = build_status(_QUIET_HTML, saturday)
        assert result.target_date == "2026-01-26"
        assert result.message.startswith("Next school day (Monday, January 26, 2026)")

    def test_selector_limits_classified_text(self) -> None:
        html = '<div id="alert"><p>Welcome back!</p></div><p>Parking lot closed for paving.</p>'
        assert build_status(html, _TUESDAY).status == "Closed"
        assert build_status(html, _TUESDAY, selector="#alert").status == "Open"

    def test_announcement_is_normalised_text(self) -> None:
        result = build_status(_ONLINE_HTML, _TUESDAY)
        assert "<" not in result.announcement
        assert "Weather Update" in result.announcement

    def test_idempotent(self) -> None:
        assert build_status(_ONLINE_HTML, _TUESDAY) == build_status(_ONLINE_HTML, _TUESDAY)


# ---------------------------------------------------------------------------
# StatusService cache
# ---------------------------------------------------------------------------

class TestCaching:
    def test_second_call_within_window_is_cached(self) -> None:
        fetcher = FakeFetcher(_ONLINE_HTML)
        clock = FakeClock(_TUESDAY)
        service = _service(fetcher, clock)

        first = service.get_status()
        clock.advance(299)
        second = service.get_status()

        assert fetcher.calls == 1
        assert first.cached is False
        assert second.cached is True
        assert second.message == first.message
        assert second.last_updated == first.last_updated

    def test_expired_cache_refetches(self) -> None:
        fetcher = FakeFetcher(_ONLINE_HTML, _QUIET_HTML)
        clock = FakeClock(_TUESDAY)
        service = _service(fetcher, clock)

        service.get_status()
        clock.advance(300)
        result = service.get_status()

        assert fetcher.calls == 2
        assert result.cached is False
        assert result.status == "Open"

    def test_zero_window_disables_cache(self) -> None:
        fetcher = FakeFetcher(_QUIET_HTML)
        service = _service(fetcher, cache_ttl=0.0)

        service.get_status()
        service.get_status()

        assert fetcher.calls == 2

    def test_result_metadata(self) -> None:
        service = _service(FakeFetcher(_QUIET_HTML))
        result = service.get_status()

        assert result.verified is True
        assert result.stale is False
        assert result.source == "Test District"
        assert result.last_updated == _TUESDAY.isoformat()
        assert result.processing_time.endswith("ms")

    def test_settings_thresholds_applied(self) -> None:
        service = _service(FakeFetcher("<p>" + "x" * 30 + "</p>"), alert_min_length=30)
        assert service.get_status().status == "Alert"

    def test_concurrent_callers_share_one_fetch(self) -> None:
        release = threading.Event()
        calls: List[int] = []

        def slow_fetcher() -> RawPage:
            calls.append(1)
            release.wait(timeout=5)
            return RawPage("https://district.example/", _QUIET_HTML, 200, 0, _TUESDAY)

        service = _service(slow_fetcher)
        results = []
        threads = [
            threading.Thread(target=lambda: results.append(service.get_status()))
            for _ in range(5)
        ]
        for t in threads:
            t.start()
        release.set()
        for t in threads:
            t.join(timeout=5)

        assert len(calls) == 1
        assert len(results) == 5
        assert sum(1 for r in results if not r.cached) == 1


class TestFailures:
    @pytest.mark.parametrize(
        "error",
        [FetchError("HTTP error! status: 500"), ResponseTooLargeError(1000), RuntimeError("bug")],
    )
    def test_failure_without_cache_returns_error_shape(self, error: Exception) -> None:
        service = _service(FakeFetcher(error))
        result = service.get_status()

        assert result.verified is False
        assert result.is_open is False
        assert result.status == UNAVAILABLE_STATUS
        assert result.confidence == 0.0
        assert result.target_date == "2026-01-20"
        assert result.source == "Test District"

    def test_failure_is_not_cached(self) -> None:
        fetcher = FakeFetcher(FetchError("down"), _QUIET_HTML)
        service = _service(fetcher)

        assert service.get_status().verified is False
        result = service.get_status()

        assert fetcher.calls == 2
        assert result.verified is True
        assert result.cached is False

    def test_failure_serves_last_good_value_as_stale(self) -> None:
        fetcher = FakeFetcher(_ONLINE_HTML, FetchError("down"))
        clock = FakeClock(_TUESDAY)
        service = _service(fetcher, clock)

        good = service.get_status()
        clock.advance(600)
        stale = service.get_status()

        assert stale.stale is True
        assert stale.cached is True
        assert stale.verified is True
        assert stale.message == good.message
        assert stale.last_updated == good.last_updated

    def test_recovery_replaces_stale_value(self) -> None:
        fetcher = FakeFetcher(_ONLINE_HTML, FetchError("down"), _QUIET_HTML)
        clock = FakeClock(_TUESDAY)
        service = _service(fetcher, clock)

        service.get_status()
        clock.advance(600)
        service.get_status()
        fresh = service.get_status()

        assert fetcher.calls == 3
        assert fresh.stale is False
        assert fresh.status == "Open"
