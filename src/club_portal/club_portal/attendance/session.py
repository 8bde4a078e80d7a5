from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional, Sequence

from ..audit.model import Actor
from ..common.datetime_utils import now_local
from ..core.constants import RECONCILIATION_TTL_MINUTES
from ..core.exceptions import NotFoundError, ValidationError
from ..events.model import Event, Registrant
from .model import CandidateRecord, MatchResult

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    REVIEW = "review"
    UPLOADING = "uploading"
    SUCCESS = "success"


@dataclass
class ReconciliationSession:
    """One operator's in-progress bulk attendance upload for one event.

    The presence selection starts as exactly the matched member ids. Only
    matched members and members who RSVP'd can be toggled, so the selection
    never holds anything outside the member registry.
    """

    token: str
    event: Event
    actor: Actor
    candidates: list[CandidateRecord]
    result: MatchResult
    expected: list[Registrant] = field(default_factory=list)
    selection: set[int] = field(default_factory=set)
    state: SessionState = SessionState.REVIEW
    opened_at: Optional[datetime] = None
    committed_count: int = 0

    @classmethod
    def open(
        cls,
        *,
        event: Event,
        actor: Actor,
        candidates: Sequence[CandidateRecord],
        result: MatchResult,
        expected: Sequence[Registrant] = (),
        opened_at: Optional[datetime] = None,
        token: Optional[str] = None,
    ) -> "ReconciliationSession":
        return cls(
            token=token or uuid.uuid4().hex,
            event=event,
            actor=actor,
            candidates=list(candidates),
            result=result,
            expected=list(expected),
            selection=set(result.matched_member_ids()),
            opened_at=opened_at,
        )

    def toggleable_ids(self) -> set[int]:
        return set(self.result.matched_member_ids()) | {r.member_id for r in self.expected}

    def is_selected(self, member_id: int) -> bool:
        return int(member_id) in self.selection

    def toggle(self, member_id: int) -> bool:
        """Flip one member's presence. Returns True if now selected."""
        if self.state != SessionState.REVIEW:
            raise ValidationError("Attendance can only be edited while reviewing")
        member_id = int(member_id)
        if member_id not in self.toggleable_ids():
            raise ValidationError("Only matched or registered members can be marked present")

        if member_id in self.selection:
            self.selection.discard(member_id)
            return False
        self.selection.add(member_id)
        return True

    def present_ids(self) -> list[int]:
        return sorted(self.selection)

    def begin_commit(self) -> list[int]:
        if self.state != SessionState.REVIEW:
            raise ValidationError("This upload is not awaiting review")
        ids = self.present_ids()
        if not ids:
            raise ValidationError("Select at least one member before committing")
        self.state = SessionState.UPLOADING
        return ids

    def commit_failed(self) -> None:
        self.state = SessionState.REVIEW

    def commit_succeeded(self, count: int) -> None:
        self.committed_count = int(count)
        self.state = SessionState.SUCCESS

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "state": self.state.value,
            "event": self.event.to_dict(),
            "matched": [
                {**m.to_dict(), "present": m.member_id in self.selection} for m in self.result.matched
            ],
            "unmatched": [c.to_dict() for c in self.result.unmatched],
            "duplicates": [c.to_dict() for c in self.result.duplicates],
            "expected": [
                {"member_id": r.member_id, "name": r.name, "qid": r.qid, "present": r.member_id in self.selection}
                for r in self.expected
            ],
            "present_count": len(self.selection),
            "committed_count": self.committed_count,
        }


class ReconciliationSessionStore:
    """In-process holder for open sessions, keyed by an opaque token.

    Sessions are not shared between operators and are lost on restart; the
    operator simply uploads the sheet again. A session left open longer than
    `ttl` is dropped the next time the store is touched.
    """

    def __init__(
        self,
        *,
        ttl: timedelta = timedelta(minutes=RECONCILIATION_TTL_MINUTES),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._sessions: dict[str, ReconciliationSession] = {}
        self._ttl = ttl
        self._clock = clock or now_local

    def _prune(self) -> None:
        cutoff = self._clock() - self._ttl
        expired = [t for t, s in self._sessions.items() if s.opened_at is not None and s.opened_at <= cutoff]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.info("Dropped %d expired attendance upload(s)", len(expired))

    def put(self, session: ReconciliationSession) -> None:
        self._prune()
        if session.opened_at is None:
            session.opened_at = self._clock()
        self._sessions[session.token] = session

    def get(self, token: Optional[str]) -> ReconciliationSession:
        self._prune()
        session = self._sessions.get(token or "")
        if session is None:
            raise NotFoundError("No attendance upload in progress")
        return session

    def discard(self, token: Optional[str]) -> None:
        self._sessions.pop(token or "", None)

    def __len__(self) -> int:
        return len(self._sessions)
