from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def upsert_attendance(self, records: Sequence[AttendanceRecord]) -> int:
        """Write all records in one transaction, keyed by (event_id, member_id).

        An existing record for a pair is overwritten, never duplicated. Either
        every record is written or none is.
        """

        raise NotImplementedError

    def delete_attendance(self, *, event_id: int, member_id: int) -> bool:
        raise NotImplementedError

    def list_for_member(self, member_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def present_event_ids_by_member(self) -> dict[int, set[int]]:
        """member_id -> ids of events where the member is marked Present."""

        raise NotImplementedError
