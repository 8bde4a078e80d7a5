from __future__ import annotations

from typing import Sequence

from ..core.enums import AuditAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AuditEntry
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, entry: AuditEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(actor_id, actor_name, action, details, created_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (entry.actor_id, entry.actor_name, entry.action.value, entry.details, entry.created_at),
            )
            return int(cur.lastrowid)

    def list_recent(self, limit: int) -> Sequence[AuditEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT audit_id, actor_id, actor_name, action, details, created_at
                FROM audit_logs
                ORDER BY created_at DESC, audit_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                AuditEntry(
                    audit_id=int(r["audit_id"]),
                    actor_id=int(r["actor_id"]) if r.get("actor_id") is not None else 0,
                    actor_name=r["actor_name"],
                    action=AuditAction(r["action"]),
                    details=r["details"],
                    created_at=r["created_at"],
                )
                for r in fetchall(cur)
            ]
