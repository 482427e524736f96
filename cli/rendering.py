"""Utilities for rendering status results in the CLI."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import List

from closurewatch.api.routers.status import StatusResponse
from closurewatch.status.models import StatusResult


def render_status(result: StatusResult, tag: str) -> str:
    """Render *result* as an aligned, human-readable block.

    Each line is prefixed with ``[tag]`` to match the other command output.
    """
    flags: List[str] = []
    if result.cached:
        flags.append("cached")
    if result.stale:
        flags.append("stale")
    if not result.verified:
        flags.append("unverified")

    lines = [
        f"[{tag}] Status     : {result.status}" + (f"  ({', '.join(flags)})" if flags else ""),
        f"[{tag}] Open       : {'yes' if result.is_open else 'no'}",
        f"[{tag}] Target day : {result.target_date}",
        f"[{tag}] Confidence : {result.confidence:.2f}",
        f"[{tag}] Source     : {result.source or '(none)'}",
    ]
    if result.last_updated:
        lines.append(f"[{tag}] Updated    : {result.last_updated}")
    lines.append("")
    lines.append(result.message)
    return "\n".join(lines)


def render_json(result: StatusResult) -> str:
    """Render *result* in the same camelCase shape as `GET /api/status`."""
    body = StatusResponse.model_validate(asdict(result)).model_dump(by_alias=True)
    return json.dumps(body, indent=2, ensure_ascii=False)
