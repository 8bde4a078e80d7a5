from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import MemberStatus, RequestStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import UPDATABLE_FIELDS, Member, NewMember, ProfileUpdateRequest
from .repository import MemberRepository

_MEMBER_COLUMNS = """
    member_id, qid, uid, name, email, status, role, phone, gender, course, branch,
    section, hosteler_status, profile_photo, created_at, password_hash
"""


def _to_member(r: Dict[str, Any]) -> Member:
    return Member(
        member_id=int(r["member_id"]),
        qid=r["qid"],
        uid=r["uid"],
        name=r["name"],
        email=r["email"],
        status=MemberStatus(r["status"]),
        role=Role(r["role"]),
        phone=r.get("phone"),
        gender=r.get("gender"),
        course=r.get("course"),
        branch=r.get("branch"),
        section=r.get("section"),
        hosteler_status=r.get("hosteler_status"),
        profile_photo=r.get("profile_photo"),
        created_at=r.get("created_at"),
        password_hash=r.get("password_hash") or "",
    )


def _to_request(r: Dict[str, Any]) -> ProfileUpdateRequest:
    return ProfileUpdateRequest(
        request_id=int(r["request_id"]),
        member_id=int(r["member_id"]),
        status=RequestStatus(r["status"]),
        phone=r.get("phone"),
        course=r.get("course"),
        branch=r.get("branch"),
        section=r.get("section"),
        gender=r.get("gender"),
        created_at=r.get("created_at"),
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value: Any) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_MEMBER_COLUMNS} FROM members WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _to_member(row) if row else None

    def get_by_id(self, member_id: int) -> Optional[Member]:
        return self._get_one("member_id", int(member_id))

    def get_by_email(self, email: str) -> Optional[Member]:
        return self._get_one("email", email)

    def get_by_qid(self, qid: str) -> Optional[Member]:
        return self._get_one("qid", qid)

    def find_by_identifiers(self, identifiers: Sequence[str]) -> Sequence[Member]:
        values = list(dict.fromkeys(identifiers))
        if not values:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_MEMBER_COLUMNS} FROM members WHERE qid IN ({in_clause(values)})",
                tuple(values),
            )
            return [_to_member(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_MEMBER_COLUMNS} FROM members ORDER BY name ASC")
            return [_to_member(r) for r in fetchall(cur)]

    def list_by_status(self, status: MemberStatus) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_MEMBER_COLUMNS} FROM members WHERE status=%s ORDER BY created_at DESC",
                (status.value,),
            )
            return [_to_member(r) for r in fetchall(cur)]

    def create(self, member: NewMember) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO members(qid, uid, name, email, password_hash, phone, gender, course,
                                    branch, section, hosteler_status, profile_photo, status, role)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,'pending','member')
                """,
                (
                    member.qid,
                    member.uid,
                    member.name,
                    member.email,
                    member.password_hash,
                    member.phone,
                    member.gender,
                    member.course,
                    member.branch,
                    member.section,
                    member.hosteler_status,
                    member.profile_photo,
                ),
            )
            return int(cur.lastrowid)

    def set_status(self, member_id: int, status: MemberStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE members SET status=%s WHERE member_id=%s", (status.value, int(member_id)))
            return cur.rowcount > 0

    def update_fields(self, member_id: int, fields: dict[str, str]) -> bool:
        # Column names come from a fixed allow-list, values are parameterized.
        cols = [f for f in UPDATABLE_FIELDS if f in fields]
        if not cols:
            return False
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE members SET {assignments} WHERE member_id=%s",
                tuple(fields[c] for c in cols) + (int(member_id),),
            )
            return cur.rowcount > 0

    def create_update_request(self, *, member_id: int, proposed: dict[str, Optional[str]]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profile_update_requests(member_id, phone, course, branch, section, gender, status)
                VALUES(%s,%s,%s,%s,%s,%s,'pending')
                """,
                (int(member_id),) + tuple(proposed.get(f) for f in UPDATABLE_FIELDS),
            )
            return int(cur.lastrowid)

    def get_update_request(self, request_id: int) -> Optional[ProfileUpdateRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT request_id, member_id, phone, course, branch, section, gender, status, created_at
                FROM profile_update_requests
                WHERE request_id=%s
                """,
                (int(request_id),),
            )
            row = fetchone(cur)
            return _to_request(row) if row else None

    def list_pending_update_requests(self) -> Sequence[ProfileUpdateRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT request_id, member_id, phone, course, branch, section, gender, status, created_at
                FROM profile_update_requests
                WHERE status='pending'
                ORDER BY created_at DESC
                """
            )
            return [_to_request(r) for r in fetchall(cur)]

    def set_update_request_status(self, request_id: int, status: RequestStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profile_update_requests SET status=%s WHERE request_id=%s",
                (status.value, int(request_id)),
            )
            return cur.rowcount > 0
