from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AuditAction


@dataclass(frozen=True)
class Actor:
    """The admin performing a mutation, as read from the login session."""

    member_id: int
    name: str


@dataclass(frozen=True)
class AuditEntry:
    """Append-only record of a committed admin mutation."""

    actor_id: int
    actor_name: str
    action: AuditAction
    details: str
    created_at: datetime
    audit_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "audit_id": self.audit_id,
            "actor_id": self.actor_id,
            "actor_name": self.actor_name,
            "action": self.action.value,
            "details": self.details,
            "created_at": self.created_at.isoformat(),
        }
