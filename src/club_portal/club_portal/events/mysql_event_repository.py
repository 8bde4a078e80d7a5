from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import EventType, Urgency
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Announcement, Event, EventWithAttendance, NewEvent, Registrant
from .repository import AnnouncementRepository, EventRepository


def _to_event(r: Dict[str, Any]) -> Event:
    return Event(
        event_id=int(r["event_id"]),
        title=r["title"],
        event_type=EventType(r["event_type"]),
        date=r["event_date"],
        location=r.get("location"),
        description=r.get("description"),
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, event_id: int) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, title, event_type, event_date, location, description
                FROM events
                WHERE event_id=%s
                """,
                (int(event_id),),
            )
            row = fetchone(cur)
            return _to_event(row) if row else None

    def list_all(self, *, types: Optional[Sequence[EventType]] = None) -> Sequence[Event]:
        where = ""
        params: tuple = ()
        if types:
            where = f"WHERE event_type IN ({in_clause(types)})"
            params = tuple(t.value for t in types)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT event_id, title, event_type, event_date, location, description
                FROM events
                {where}
                ORDER BY event_date ASC, event_id ASC
                """,
                params,
            )
            return [_to_event(r) for r in fetchall(cur)]

    def list_with_attendance_counts(self) -> Sequence[EventWithAttendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT e.event_id, e.title, e.event_type, e.event_date, e.location, e.description,
                       COUNT(ar.attendance_id) AS attendance_count
                FROM events e
                LEFT JOIN attendance_records ar ON ar.event_id = e.event_id
                GROUP BY e.event_id, e.title, e.event_type, e.event_date, e.location, e.description
                ORDER BY e.event_date DESC, e.event_id DESC
                """
            )
            return [
                EventWithAttendance(event=_to_event(r), attendance_count=int(r.get("attendance_count") or 0))
                for r in fetchall(cur)
            ]

    def create(self, event: NewEvent) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO events(title, event_type, event_date, location, description)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (event.title, event.event_type.value, event.date, event.location, event.description),
            )
            return int(cur.lastrowid)

    def delete(self, event_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM events WHERE event_id=%s", (int(event_id),))
            return cur.rowcount > 0

    def list_registrants(self, event_id: int) -> Sequence[Registrant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT m.member_id, m.name, m.qid, m.course, m.branch, m.phone, m.hosteler_status,
                       r.created_at AS registered_at
                FROM event_rsvps r
                JOIN members m ON m.member_id = r.member_id
                WHERE r.event_id=%s
                ORDER BY r.created_at ASC, m.member_id ASC
                """,
                (int(event_id),),
            )
            return [
                Registrant(
                    member_id=int(r["member_id"]),
                    name=r["name"],
                    qid=r["qid"],
                    course=r.get("course"),
                    branch=r.get("branch"),
                    phone=r.get("phone"),
                    hosteler_status=r.get("hosteler_status"),
                    registered_at=r["registered_at"],
                )
                for r in fetchall(cur)
            ]

    def list_rsvp_event_ids(self, member_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT event_id FROM event_rsvps WHERE member_id=%s", (int(member_id),))
            return [int(r["event_id"]) for r in fetchall(cur)]

    def add_rsvp(self, *, event_id: int, member_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO event_rsvps(event_id, member_id) VALUES(%s,%s)",
                (int(event_id), int(member_id)),
            )

    def remove_rsvp(self, *, event_id: int, member_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM event_rsvps WHERE event_id=%s AND member_id=%s",
                (int(event_id), int(member_id)),
            )
            return cur.rowcount > 0


class MySQLAnnouncementRepository(AnnouncementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_announcement(r: Dict[str, Any]) -> Announcement:
        return Announcement(
            announcement_id=int(r["announcement_id"]),
            title=r["title"],
            content=r["content"],
            urgency=Urgency(r["urgency"]),
            created_at=r["created_at"],
        )

    def list_recent(self) -> Sequence[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT announcement_id, title, content, urgency, created_at
                FROM announcements
                ORDER BY created_at DESC, announcement_id DESC
                """
            )
            return [self._to_announcement(r) for r in fetchall(cur)]

    def get_by_id(self, announcement_id: int) -> Optional[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT announcement_id, title, content, urgency, created_at FROM announcements WHERE announcement_id=%s",
                (int(announcement_id),),
            )
            row = fetchone(cur)
            return self._to_announcement(row) if row else None

    def create(self, *, title: str, content: str, urgency: Urgency) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO announcements(title, content, urgency) VALUES(%s,%s,%s)",
                (title, content, urgency.value),
            )
            return int(cur.lastrowid)

    def delete(self, announcement_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM announcements WHERE announcement_id=%s", (int(announcement_id),))
            return cur.rowcount > 0
