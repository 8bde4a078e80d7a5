"""Attendance percentage and eligibility rules.

Every screen that shows a percentage (directory, member detail, profile,
attendance dashboard, analytics) goes through these functions.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence

from ..core.constants import ELIGIBILITY_THRESHOLD
from ..events.model import Event, EventWithAttendance


@dataclass(frozen=True)
class AttendanceStats:
    attended: int
    total: int
    percentage: int

    @property
    def eligible(self) -> bool:
        return is_eligible(self.percentage)

    def to_dict(self) -> dict:
        return {
            "attended": self.attended,
            "total": self.total,
            "percentage": self.percentage,
            "eligible": self.eligible,
        }


def is_valid_event(event_date: datetime, *, now: datetime, attendance_count: int) -> bool:
    """An event counts once its date has passed or as soon as anyone is marked for it."""
    return event_date < now or attendance_count > 0


def valid_events(rows: Iterable[EventWithAttendance], *, now: datetime) -> list[Event]:
    return [r.event for r in rows if is_valid_event(r.event.date, now=now, attendance_count=r.attendance_count)]


def attendance_percentage(attended: int, total: int) -> int:
    """round(100 * attended / total), half-up, clamped to 0..100; 0 when total is 0."""
    if total <= 0:
        return 0
    pct = (200 * attended + total) // (2 * total)
    return max(0, min(100, pct))


def is_eligible(percentage: int) -> bool:
    return percentage >= ELIGIBILITY_THRESHOLD


def compute_stats(valid_event_ids: Iterable[int], present_event_ids: Iterable[int]) -> AttendanceStats:
    """Only presence on valid events counts toward `attended`."""
    valid = set(valid_event_ids)
    attended = len(valid & set(present_event_ids))
    return AttendanceStats(attended=attended, total=len(valid), percentage=attendance_percentage(attended, len(valid)))


def stats_for_events(events: Sequence[Event], present_event_ids: Iterable[int]) -> AttendanceStats:
    return compute_stats((e.event_id for e in events), present_event_ids)
