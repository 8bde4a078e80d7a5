from __future__ import annotations

from datetime import datetime

from ..core.exceptions import ValidationError


def parse_iso_datetime(value: str) -> datetime:
    """Parse 'YYYY-MM-DDTHH:MM[:SS]' (or a bare date) into a naive datetime."""
    v = (value or "").strip()
    try:
        return datetime.fromisoformat(v)
    except ValueError:
        raise ValidationError(f"Invalid date/time: {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now()
