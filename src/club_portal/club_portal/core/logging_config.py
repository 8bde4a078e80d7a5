"""Logging setup shared by the web app and the maintenance scripts.

Format: 2026-01-06T14:05:52Z [club-portal] INFO message
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone


class ISO8601Formatter(logging.Formatter):
    """Formatter producing UTC ISO-8601 timestamps and a source tag."""

    def __init__(self, source: str = "club-portal"):
        self.source = source
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"{timestamp} [{self.source}] {record.levelname} {message}"


def configure_logging(level: str | int = "INFO", *, source: str = "club-portal") -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ISO8601Formatter(source))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # werkzeug prints its own request lines; keep them but at our level.
    logging.getLogger("werkzeug").setLevel(max(level, logging.INFO))
