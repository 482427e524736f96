"""Logging configuration.

A single function initialises the root logger with a consistent text format;
modules grab named loggers through :func:`get_logger`.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler: Optional[logging.Handler] = None


def configure_logging(level: str | int | None = None) -> None:
    """Configure the root logger to write to stderr.

    Safe to call more than once; the handler installed by a previous call is
    replaced rather than duplicated.
    """
    global _handler

    if level is None:
        from closurewatch.config import settings  # noqa: PLC0415

        level = settings.log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(_handler)
    root.setLevel(level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
