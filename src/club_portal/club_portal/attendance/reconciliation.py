from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..audit.model import Actor
from ..audit.service import AuditService
from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, AuditAction
from ..core.exceptions import IngestionError, NotFoundError, StorageError
from ..events.repository import EventRepository
from ..members.repository import MemberRepository
from .ingestion import parse_attendance_csv
from .matcher import match_candidates
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .session import ReconciliationSession, ReconciliationSessionStore

logger = logging.getLogger(__name__)


class ReconciliationService:
    """Use case: bulk attendance from an uploaded sign-in sheet.

    start() parses and matches the sheet and opens a review session; the
    operator toggles presence on the session; commit() writes the selection.
    """

    def __init__(
        self,
        members: MemberRepository,
        events: EventRepository,
        attendance: AttendanceRepository,
        audit: AuditService,
        *,
        store: Optional[ReconciliationSessionStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._members = members
        self._events = events
        self._attendance = attendance
        self._audit = audit
        self._store = store or ReconciliationSessionStore()
        self._clock = clock or now_local

    @property
    def store(self) -> ReconciliationSessionStore:
        return self._store

    def start(self, *, event_id: int, csv_text: str, actor: Actor) -> ReconciliationSession:
        event = self._events.get_by_id(int(event_id))
        if not event:
            raise NotFoundError("Event not found")

        try:
            candidates = parse_attendance_csv(csv_text)
        except IngestionError as exc:
            logger.warning("Rejected attendance sheet for event %s: %s", event.event_id, exc)
            raise
        identifiers = list(dict.fromkeys(c.identifier for c in candidates))
        members = self._members.find_by_identifiers(identifiers) if identifiers else []
        result = match_candidates(candidates, members)

        session = ReconciliationSession.open(
            event=event,
            actor=actor,
            candidates=candidates,
            result=result,
            expected=self._events.list_registrants(event.event_id),
            opened_at=self._clock(),
        )
        self._store.put(session)
        logger.info(
            "Attendance sheet for event %s: %d matched, %d unmatched, %d duplicate rows",
            event.event_id,
            len(result.matched),
            len(result.unmatched),
            len(result.duplicates),
        )
        return session

    def get(self, token: Optional[str]) -> ReconciliationSession:
        return self._store.get(token)

    def toggle(self, token: Optional[str], member_id: int) -> bool:
        return self._store.get(token).toggle(member_id)

    def cancel(self, token: Optional[str]) -> None:
        self._store.discard(token)

    def commit(self, session: ReconciliationSession) -> int:
        """Write one Present record per selected member, then one audit entry.

        On a storage error nothing is audited, the session goes back to review
        with its lists and selection untouched, and the error propagates.
        """
        member_ids = session.begin_commit()
        records = [
            AttendanceRecord(event_id=session.event.event_id, member_id=mid, status=AttendanceStatus.PRESENT)
            for mid in member_ids
        ]

        try:
            self._attendance.upsert_attendance(records)
        except StorageError:
            session.commit_failed()
            logger.exception("Attendance commit failed for event %s", session.event.event_id)
            raise

        try:
            self._audit.record(
                session.actor,
                AuditAction.BULK_ATTENDANCE,
                f'Marked {len(records)} members present for "{session.event.title}".',
            )
        except StorageError:
            # Records are in; a retry re-upserts the same pairs and writes the entry.
            session.commit_failed()
            logger.exception("Audit entry for event %s could not be written", session.event.event_id)
            raise

        session.commit_succeeded(len(records))
        return len(records)
