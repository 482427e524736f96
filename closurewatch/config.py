"""Centralised settings for the closure-watch service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

# Load .env from the project root (one level up from the package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_STATUS_URL = "https://www.forsyth.k12.ga.us/fs/pages/0/page-pops"
_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Upstream status page
    # ------------------------------------------------------------------
    status_url: str = field(
        default_factory=lambda: os.environ.get("STATUS_URL", _DEFAULT_STATUS_URL)
    )
    source_name: str = field(
        default_factory=lambda: os.environ.get("STATUS_SOURCE_NAME", "Forsyth County Schools")
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("STATUS_USER_AGENT", _DEFAULT_USER_AGENT)
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "15.0"))
    )
    max_response_bytes: int = field(
        default_factory=lambda: int(os.environ.get("MAX_RESPONSE_SIZE", "1000000"))
    )
    announcement_selector: str = field(
        default_factory=lambda: os.environ.get("ANNOUNCEMENT_SELECTOR", "")
    )

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------
    cache_ttl: float = field(
        default_factory=lambda: float(os.environ.get("CACHE_TTL_SECONDS", "300"))
    )

    # ------------------------------------------------------------------
    # Classification / summary
    # ------------------------------------------------------------------
    timezone: str = field(
        default_factory=lambda: os.environ.get("TIMEZONE", "America/New_York")
    )
    alert_min_length: int = field(
        default_factory=lambda: int(os.environ.get("ALERT_MIN_LENGTH", "150"))
    )
    excerpt_max_chars: int = field(
        default_factory=lambda: int(os.environ.get("EXCERPT_MAX_CHARS", "240"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )

    @property
    def tz(self) -> ZoneInfo:
        """District-local timezone used for "now"."""
        return ZoneInfo(self.timezone)


# Module-level singleton, import this everywhere:
#   from closurewatch.config import settings
settings = Settings()
