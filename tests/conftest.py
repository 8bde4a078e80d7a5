from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.club_portal.club_portal.attendance.model import AttendanceRecord
from src.club_portal.club_portal.audit.model import Actor, AuditEntry
from src.club_portal.club_portal.container import build_services
from src.club_portal.club_portal.content.model import ContentItem
from src.club_portal.club_portal.core.enums import (
    AttendanceStatus,
    EventType,
    MemberStatus,
    RequestStatus,
    Role,
)
from src.club_portal.club_portal.core.exceptions import StorageError
from src.club_portal.club_portal.events.model import (
    Announcement,
    Event,
    EventWithAttendance,
    NewEvent,
    Registrant,
)
from src.club_portal.club_portal.members.model import Member, NewMember, ProfileUpdateRequest

NOW = datetime(2026, 3, 15, 12, 0, 0)


class InMemoryMembers:
    def __init__(self, members=()):
        self._members: dict[int, Member] = {m.member_id: m for m in members}
        self._requests: dict[int, ProfileUpdateRequest] = {}
        self._next_id = max(self._members, default=0) + 1
        self._next_request = 1
        self.lookups: list[list[str]] = []

    def add(self, **kwargs) -> Member:
        member_id = kwargs.pop("member_id", self._next_id)
        self._next_id = max(self._next_id, member_id + 1)
        kwargs.setdefault("uid", f"P{kwargs['qid']}")
        kwargs.setdefault("email", f"{kwargs['qid'].lower()}@club.local")
        kwargs.setdefault("status", MemberStatus.APPROVED)
        member = Member(member_id=member_id, **kwargs)
        self._members[member_id] = member
        return member

    def get_by_id(self, member_id: int) -> Optional[Member]:
        return self._members.get(member_id)

    def get_by_email(self, email: str) -> Optional[Member]:
        return next((m for m in self._members.values() if m.email == email), None)

    def get_by_qid(self, qid: str) -> Optional[Member]:
        return next((m for m in self._members.values() if m.qid == qid), None)

    def find_by_identifiers(self, identifiers):
        self.lookups.append(list(identifiers))
        wanted = set(identifiers)
        return [m for m in self._members.values() if m.qid in wanted]

    def list_all(self):
        return list(self._members.values())

    def list_by_status(self, status: MemberStatus):
        return [m for m in self._members.values() if m.status == status]

    def create(self, member: NewMember) -> int:
        member_id = self._next_id
        self._next_id += 1
        self._members[member_id] = Member(member_id=member_id, status=MemberStatus.PENDING, **member.__dict__)
        return member_id

    def set_status(self, member_id: int, status: MemberStatus) -> bool:
        # Like a plain MySQL connection, an update that changes nothing reports no row.
        member = self._members.get(member_id)
        if member is None or member.status == status:
            return False
        self._members[member_id] = replace(member, status=status)
        return True

    def update_fields(self, member_id: int, fields: dict) -> bool:
        if member_id not in self._members:
            return False
        self._members[member_id] = replace(self._members[member_id], **fields)
        return True

    def create_update_request(self, *, member_id: int, proposed: dict) -> int:
        rid = self._next_request
        self._next_request += 1
        self._requests[rid] = ProfileUpdateRequest(
            request_id=rid,
            member_id=member_id,
            status=RequestStatus.PENDING,
            created_at=NOW,
            **proposed,
        )
        return rid

    def get_update_request(self, request_id: int):
        return self._requests.get(request_id)

    def list_pending_update_requests(self):
        return [r for r in self._requests.values() if r.status == RequestStatus.PENDING]

    def set_update_request_status(self, request_id: int, status: RequestStatus) -> bool:
        self._requests[request_id] = replace(self._requests[request_id], status=status)
        return True


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[tuple[int, int], AttendanceRecord] = {}
        self.fail_next_upsert = False
        self.upsert_calls = 0

    def upsert_attendance(self, records) -> int:
        self.upsert_calls += 1
        if self.fail_next_upsert:
            self.fail_next_upsert = False
            raise StorageError("connection lost")
        for r in records:
            self.records[(r.event_id, r.member_id)] = r
        return len(records)

    def delete_attendance(self, *, event_id: int, member_id: int) -> bool:
        return self.records.pop((event_id, member_id), None) is not None

    def list_for_member(self, member_id: int):
        return [r for (_, mid), r in self.records.items() if mid == member_id]

    def present_event_ids_by_member(self):
        out: dict[int, set[int]] = {}
        for (eid, mid), r in self.records.items():
            if r.status == AttendanceStatus.PRESENT:
                out.setdefault(mid, set()).add(eid)
        return out

    def count_for_event(self, event_id: int) -> int:
        return sum(1 for (eid, _) in self.records if eid == event_id)


class InMemoryEvents:
    def __init__(self, members: InMemoryMembers, attendance: InMemoryAttendance):
        self._members = members
        self._attendance = attendance
        self._events: dict[int, Event] = {}
        self._rsvps: dict[tuple[int, int], datetime] = {}
        self._next_id = 1

    def add(self, title: str, date: datetime, event_type: EventType = EventType.EVENT, **kwargs) -> Event:
        event = Event(event_id=self._next_id, title=title, event_type=event_type, date=date, **kwargs)
        self._events[event.event_id] = event
        self._next_id += 1
        return event

    def get_by_id(self, event_id: int):
        return self._events.get(event_id)

    def list_all(self, *, types=None):
        events = sorted(self._events.values(), key=lambda e: e.date)
        if types:
            events = [e for e in events if e.event_type in types]
        return events

    def list_with_attendance_counts(self):
        return [
            EventWithAttendance(event=e, attendance_count=self._attendance.count_for_event(e.event_id))
            for e in sorted(self._events.values(), key=lambda e: e.date, reverse=True)
        ]

    def create(self, event: NewEvent) -> int:
        return self.add(
            event.title,
            event.date,
            event.event_type,
            location=event.location,
            description=event.description,
        ).event_id

    def delete(self, event_id: int) -> bool:
        return self._events.pop(event_id, None) is not None

    def list_registrants(self, event_id: int):
        out = []
        for (eid, mid), at in sorted(self._rsvps.items(), key=lambda kv: kv[1]):
            if eid != event_id:
                continue
            m = self._members.get_by_id(mid)
            out.append(
                Registrant(
                    member_id=m.member_id,
                    name=m.name,
                    qid=m.qid,
                    course=m.course,
                    branch=m.branch,
                    phone=m.phone,
                    hosteler_status=m.hosteler_status,
                    registered_at=at,
                )
            )
        return out

    def list_rsvp_event_ids(self, member_id: int):
        return [eid for (eid, mid) in self._rsvps if mid == member_id]

    def add_rsvp(self, *, event_id: int, member_id: int) -> None:
        self._rsvps[(event_id, member_id)] = datetime(2026, 3, 1, 9, 0, len(self._rsvps))

    def remove_rsvp(self, *, event_id: int, member_id: int) -> bool:
        return self._rsvps.pop((event_id, member_id), None) is not None


class InMemoryAnnouncements:
    def __init__(self):
        self._items: dict[int, Announcement] = {}
        self._next_id = 1

    def list_recent(self):
        return sorted(self._items.values(), key=lambda a: a.announcement_id, reverse=True)

    def get_by_id(self, announcement_id: int):
        return self._items.get(announcement_id)

    def create(self, *, title, content, urgency) -> int:
        aid = self._next_id
        self._next_id += 1
        self._items[aid] = Announcement(aid, title, content, urgency, NOW)
        return aid

    def delete(self, announcement_id: int) -> bool:
        return self._items.pop(announcement_id, None) is not None


class InMemoryAudit:
    def __init__(self):
        self.entries: list[AuditEntry] = []
        self.fail_next_append = False

    def append(self, entry: AuditEntry) -> int:
        if self.fail_next_append:
            self.fail_next_append = False
            raise StorageError("audit table unavailable")
        self.entries.append(replace(entry, audit_id=len(self.entries) + 1))
        return len(self.entries)

    def list_recent(self, limit: int):
        return list(reversed(self.entries))[:limit]


class InMemoryContent:
    def __init__(self):
        self._items: dict[int, ContentItem] = {}
        self._next_id = 1

    def list_items(self, section, *, category=None):
        items = [i for i in self._items.values() if i.section == section]
        if category:
            items = [i for i in items if i.fields.get("category") == category]
        return sorted(items, key=lambda i: i.item_id, reverse=True)

    def get_item(self, section, item_id):
        item = self._items.get(item_id)
        return item if item and item.section == section else None

    def create_item(self, section, fields) -> int:
        iid = self._next_id
        self._next_id += 1
        self._items[iid] = ContentItem(item_id=iid, section=section, fields=dict(fields), created_at=NOW)
        return iid

    def delete_item(self, section, item_id) -> bool:
        return self._items.pop(item_id, None) is not None


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def admin() -> Actor:
    return Actor(member_id=1, name="Asha Admin")


@pytest.fixture
def members_repo() -> InMemoryMembers:
    repo = InMemoryMembers()
    repo.add(
        member_id=1,
        qid="ADM001",
        name="Asha Admin",
        email="admin@club.local",
        role=Role.ADMIN,
        password_hash=generate_password_hash("admin123"),
    )
    return repo


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def events_repo(members_repo, attendance_repo) -> InMemoryEvents:
    return InMemoryEvents(members_repo, attendance_repo)


@pytest.fixture
def audit_repo() -> InMemoryAudit:
    return InMemoryAudit()


@pytest.fixture
def container(members_repo, events_repo, attendance_repo, audit_repo, now):
    return build_services(
        members_repo=members_repo,
        events_repo=events_repo,
        announcements_repo=InMemoryAnnouncements(),
        attendance_repo=attendance_repo,
        audit_repo=audit_repo,
        content_repo=InMemoryContent(),
        clock=lambda: now,
    )
