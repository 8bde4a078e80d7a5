from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import AUDIT_LOG_LIMIT
from ..core.enums import AuditAction
from .model import Actor, AuditEntry
from .repository import AuditRepository

logger = logging.getLogger(__name__)


class AuditService:
    """Use case: write and read the admin audit trail."""

    def __init__(self, audit: AuditRepository, *, clock: Optional[Callable[[], datetime]] = None):
        self._audit = audit
        self._clock = clock or now_local

    def record(self, actor: Actor, action: AuditAction, details: str) -> AuditEntry:
        entry = AuditEntry(
            actor_id=actor.member_id,
            actor_name=actor.name,
            action=action,
            details=details,
            created_at=self._clock(),
        )
        self._audit.append(entry)
        logger.info("audit %s by %s: %s", action.value, actor.name, details)
        return entry

    def recent(self, limit: int = AUDIT_LOG_LIMIT) -> Sequence[AuditEntry]:
        return self._audit.list_recent(int(limit))
