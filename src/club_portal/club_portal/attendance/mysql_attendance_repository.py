from __future__ import annotations

from typing import Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_attendance(self, records: Sequence[AttendanceRecord]) -> int:
        if not records:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance_records(event_id, member_id, status)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status)
                """,
                [(int(r.event_id), int(r.member_id), r.status.value) for r in records],
            )
        return len(records)

    def delete_attendance(self, *, event_id: int, member_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_records WHERE event_id=%s AND member_id=%s",
                (int(event_id), int(member_id)),
            )
            return cur.rowcount > 0

    def list_for_member(self, member_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT event_id, member_id, status FROM attendance_records WHERE member_id=%s",
                (int(member_id),),
            )
            return [
                AttendanceRecord(
                    event_id=int(r["event_id"]),
                    member_id=int(r["member_id"]),
                    status=AttendanceStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]

    def present_event_ids_by_member(self) -> dict[int, set[int]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT member_id, event_id FROM attendance_records WHERE status=%s",
                (AttendanceStatus.PRESENT.value,),
            )
            out: dict[int, set[int]] = {}
            for r in fetchall(cur):
                out.setdefault(int(r["member_id"]), set()).add(int(r["event_id"]))
            return out
