from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..audit.model import Actor
from ..audit.service import AuditService
from ..common.datetime_utils import now_local
from ..core.constants import DASHBOARD_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, AuditAction, EventType
from ..core.exceptions import NotFoundError
from ..events.repository import EventRepository
from ..members.repository import MemberRepository
from .eligibility import attendance_percentage, stats_for_events, valid_events
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

CATEGORY_LABELS = {
    EventType.VISIT: "Village Visits",
    EventType.EVENT: "Campus Events",
    EventType.MEETING: "Meetings",
    EventType.CAMPAIGN: "Campaigns",
}


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        events: EventRepository,
        members: MemberRepository,
        audit: AuditService,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._attendance = attendance
        self._events = events
        self._members = members
        self._audit = audit
        self._clock = clock or now_local

    def _present_event_ids(self, member_id: int) -> set[int]:
        return {
            r.event_id
            for r in self._attendance.list_for_member(int(member_id))
            if r.status == AttendanceStatus.PRESENT
        }

    def member_summary(self, member_id: int) -> dict:
        """Overall stats, per-category breakdown and recent history for one member."""
        events = valid_events(self._events.list_with_attendance_counts(), now=self._clock())
        present = self._present_event_ids(member_id)
        overall = stats_for_events(events, present)

        categories = []
        for etype, label in CATEGORY_LABELS.items():
            in_cat = [e for e in events if e.event_type == etype]
            attended = sum(1 for e in in_cat if e.event_id in present)
            categories.append(
                {
                    "name": label,
                    "type": etype.value,
                    "attended": attended,
                    "total": len(in_cat),
                    "percentage": attendance_percentage(attended, len(in_cat)),
                }
            )

        history = [
            {
                "event_id": e.event_id,
                "event": e.title,
                "date": e.date.isoformat(),
                "status": (AttendanceStatus.PRESENT if e.event_id in present else AttendanceStatus.ABSENT).value,
            }
            for e in events[:DASHBOARD_HISTORY_LIMIT]
        ]
        return {"overall": overall.to_dict(), "categories": categories, "history": history}

    def set_member_attendance(self, *, actor: Actor, event_id: int, member_id: int, present: bool) -> None:
        """Admin override from the member detail page."""
        member = self._members.get_by_id(int(member_id))
        if not member:
            raise NotFoundError("Member not found")
        event = self._events.get_by_id(int(event_id))
        if not event:
            raise NotFoundError("Event not found")

        if present:
            self._attendance.upsert_attendance(
                [AttendanceRecord(event_id=event.event_id, member_id=member.member_id, status=AttendanceStatus.PRESENT)]
            )
        else:
            self._attendance.delete_attendance(event_id=event.event_id, member_id=member.member_id)

        status = AttendanceStatus.PRESENT if present else AttendanceStatus.ABSENT
        self._audit.record(
            actor,
            AuditAction.MANUAL_ATTENDANCE_EDIT,
            f"Changed {member.name}'s attendance to {status.value.upper()}.",
        )
