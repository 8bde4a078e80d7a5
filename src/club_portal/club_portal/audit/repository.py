from __future__ import annotations

from typing import Protocol, Sequence

from .model import AuditEntry


class AuditRepository(Protocol):
    def append(self, entry: AuditEntry) -> int:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AuditEntry]:
        raise NotImplementedError
