"""Tests for the closure-watch CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli.main import app
from closurewatch.status.models import StatusResult

runner = CliRunner()

_PAGE = """\
<html><body>
<p>Tuesday, January 27: schools will have a two-hour delay.</p>
</body></html>
"""


@pytest.fixture
def page_file(tmp_path: Path) -> Path:
    path = tmp_path / "page-pops.html"
    path.write_text(_PAGE, encoding="utf-8")
    return path


def _result(verified: bool = True) -> StatusResult:
    return StatusResult(
        is_open=True,
        status="Open" if verified else "Status Unavailable",
        message="Today (Tuesday, January 20, 2026): Open / Normal schedule",
        announcement="",
        target_date="2026-01-20",
        confidence=0.9 if verified else 0.0,
        last_updated="2026-01-20T07:00:00",
        source="Test District",
        processing_time="3ms",
        verified=verified,
    )


class _FakeService:
    result = _result()

    def get_status(self) -> StatusResult:
        return self.result


class TestParse:
    def test_parse_saved_page(self, page_file: Path) -> None:
        result = runner.invoke(app, ["parse", "--file", str(page_file), "--date", "2026-01-20"])

        assert result.exit_code == 0, result.output
        assert "[parse] Status     : Delayed" in result.output
        assert "[parse] Target day : 2026-01-27" in result.output
        assert "Upcoming (Tuesday, January 27, 2026): Delayed" in result.output

    def test_parse_json(self, page_file: Path) -> None:
        result = runner.invoke(
            app, ["parse", "--file", str(page_file), "--date", "2026-01-20", "--json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["status"] == "Delayed"
        assert data["isOpen"] is False
        assert data["targetDate"] == "2026-01-27"
        assert data["source"] == str(page_file)
        assert "is_open" not in data

    def test_parse_rejects_bad_date(self, page_file: Path) -> None:
        result = runner.invoke(app, ["parse", "--file", str(page_file), "--date", "01/20/2026"])
        assert result.exit_code != 0

    def test_parse_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["parse", "--file", str(tmp_path / "missing.html")])
        assert result.exit_code != 0


class TestCheck:
    def test_check_prints_status(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cli.main.configure_logging", lambda: None)
        monkeypatch.setattr("cli.main.StatusService", _FakeService)
        result = runner.invoke(app, ["check"])

        assert result.exit_code == 0, result.output
        assert "[check] Status     : Open" in result.output
        assert "Open / Normal schedule" in result.output

    def test_check_fails_when_unverified(self, monkeypatch: pytest.MonkeyPatch) -> None:
        class _Down(_FakeService):
            result = _result(verified=False)

        monkeypatch.setattr("cli.main.configure_logging", lambda: None)
        monkeypatch.setattr("cli.main.StatusService", _Down)
        result = runner.invoke(app, ["check"])

        assert result.exit_code == 1
        assert "unverified" in result.output
