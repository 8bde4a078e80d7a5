from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Callable, Optional

from ..attendance.eligibility import is_valid_event
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_BRANCH, PULSE_EVENT_COUNT, PULSE_TITLE_LENGTH
from ..core.enums import MemberStatus
from ..events.repository import EventRepository
from ..members.repository import MemberRepository


def _as_series(counter: Counter) -> list[dict]:
    return [{"name": k, "value": v} for k, v in counter.items()]


def _branch_key(branch: Optional[str]) -> str:
    if not branch or branch == DEFAULT_BRANCH:
        return "OTHER"
    return branch.upper()


def _mean_half_up(values: list[int]) -> int:
    if not values:
        return 0
    total, count = sum(values), len(values)
    return (2 * total + count) // (2 * count)


def _short_title(title: str) -> str:
    if len(title) > PULSE_TITLE_LENGTH:
        return title[:PULSE_TITLE_LENGTH] + "..."
    return title


class AnalyticsService:
    """Aggregates for the admin analytics dashboard."""

    def __init__(
        self,
        members: MemberRepository,
        events: EventRepository,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._members = members
        self._events = events
        self._clock = clock or now_local

    def overview(self) -> dict:
        approved = self._members.list_by_status(MemberStatus.APPROVED)
        now = self._clock()

        # Newest first, as returned by the repository.
        valid = [
            r
            for r in self._events.list_with_attendance_counts()
            if is_valid_event(r.event.date, now=now, attendance_count=r.attendance_count)
        ]
        pulse = [
            {"name": _short_title(r.event.title), "attendees": r.attendance_count}
            for r in reversed(valid[:PULSE_EVENT_COUNT])
        ]

        return {
            "total_members": len(approved),
            "branches": _as_series(Counter(_branch_key(m.branch) for m in approved)),
            "housing": _as_series(Counter(m.hosteler_status or "Unknown" for m in approved)),
            "gender": _as_series(Counter(m.gender or "Not Specified" for m in approved)),
            "event_types": _as_series(Counter(r.event.event_type.value for r in valid)),
            "pulse": pulse,
            "average_attendance": _mean_half_up([p["attendees"] for p in pulse]),
        }
