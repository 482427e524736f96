"""closure-watch CLI: entry-point for operator tasks.

Usage:
    closure-watch --help

Commands:
    check   → fetch the live status page and classify it
    parse   → run the pipeline over a saved HTML file
    serve   → run the HTTP API with uvicorn
"""

from __future__ import annotations

from datetime import datetime, time
from pathlib import Path
from typing import Optional

import typer

from closurewatch.config import settings
from closurewatch.log import configure_logging
from closurewatch.status.service import StatusService, build_status
from cli.rendering import render_json, render_status

app = typer.Typer(
    name="closure-watch",
    help="School closure status scraper and API.",
    no_args_is_help=True,
)

# Saved pages are classified as if checked on the morning of --date.
_PARSE_CHECK_TIME = time(7, 0)


# ---------------------------------------------------------------------------
# Status commands
# ---------------------------------------------------------------------------
@app.command("check")
def check(
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON."),
) -> None:
    """Fetch the district status page and print the classified status."""
    configure_logging()
    typer.echo(f"[check] Fetching {settings.status_url!r} …", err=True)
    result = StatusService().get_status()
    typer.echo(render_json(result) if as_json else render_status(result, "check"))
    if not result.verified:
        raise typer.Exit(1)


@app.command("parse")
def parse(
    file: Path = typer.Option(
        ..., "--file", exists=True, dir_okay=False, readable=True, help="Saved HTML page."
    ),
    on: Optional[str] = typer.Option(
        None, "--date", help="Reference date YYYY-MM-DD (default: today)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON."),
) -> None:
    """Classify a saved copy of the status page without touching the network."""
    if on is None:
        now = datetime.now(settings.tz)
    else:
        try:
            day = datetime.strptime(on, "%Y-%m-%d").date()
        except ValueError as exc:
            raise typer.BadParameter(f"expected YYYY-MM-DD, got {on!r}", param_hint="--date") from exc
        now = datetime.combine(day, _PARSE_CHECK_TIME, tzinfo=settings.tz)

    html = file.read_text(encoding="utf-8", errors="replace")
    result = build_status(
        html,
        now,
        selector=settings.announcement_selector or None,
        source=str(file),
        min_alert_length=settings.alert_min_length,
        excerpt_max_chars=settings.excerpt_max_chars,
    )
    typer.echo(render_json(result) if as_json else render_status(result, "parse"))


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the status API."""
    import uvicorn  # noqa: PLC0415

    typer.echo(f"[serve] Listening on http://{host}:{port}/api/status")
    uvicorn.run("closurewatch.api.app:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
