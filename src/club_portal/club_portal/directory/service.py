from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..attendance.eligibility import AttendanceStats, stats_for_events, valid_events
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..events.repository import EventRepository
from ..members.model import Member
from ..members.repository import MemberRepository
from ..members.service import matches_search


@dataclass(frozen=True)
class DirectoryEntry:
    member: Member
    stats: AttendanceStats

    def to_dict(self) -> dict:
        return {**self.member.to_dict(), **self.stats.to_dict()}


class DirectoryService:
    """Admin directory: every member with an attendance percentage."""

    def __init__(
        self,
        members: MemberRepository,
        events: EventRepository,
        attendance: AttendanceRepository,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._members = members
        self._events = events
        self._attendance = attendance
        self._clock = clock or now_local

    def list_members(self, *, search: str = "", low_attendance: bool = False) -> list[DirectoryEntry]:
        events = valid_events(self._events.list_with_attendance_counts(), now=self._clock())
        present_by_member = self._attendance.present_event_ids_by_member()

        out: list[DirectoryEntry] = []
        for member in sorted(self._members.list_all(), key=lambda m: (m.name or "").lower()):
            if not matches_search(member, search):
                continue
            stats = stats_for_events(events, present_by_member.get(member.member_id, set()))
            if low_attendance and stats.eligible:
                continue
            out.append(DirectoryEntry(member=member, stats=stats))
        return out

    def member_detail(self, member_id: int) -> dict:
        member = self._members.get_by_id(int(member_id))
        if not member:
            raise NotFoundError("Member not found")

        events = valid_events(self._events.list_with_attendance_counts(), now=self._clock())
        status_by_event = {r.event_id: r.status for r in self._attendance.list_for_member(member.member_id)}
        present = {eid for eid, st in status_by_event.items() if st == AttendanceStatus.PRESENT}

        history = [
            {
                "event_id": e.event_id,
                "title": e.title,
                "date": e.date.isoformat(),
                "type": e.event_type.value,
                "status": status_by_event.get(e.event_id, AttendanceStatus.ABSENT).value,
            }
            for e in events
        ]
        return {
            "profile": member.to_dict(),
            "stats": stats_for_events(events, present).to_dict(),
            "history": history,
        }
