from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance mark per (event, member) pair."""

    event_id: int
    member_id: int
    status: AttendanceStatus = AttendanceStatus.PRESENT


@dataclass(frozen=True)
class CandidateRecord:
    """One row of an uploaded attendance sheet, after trimming."""

    identifier: str
    display_name: str

    def to_dict(self) -> dict:
        return {"qid": self.identifier, "name": self.display_name}


@dataclass(frozen=True)
class MatchedCandidate:
    """A sheet row whose identifier resolved to a registered member.

    `display_name` is the member's canonical name, not what the sheet said.
    """

    identifier: str
    display_name: str
    member_id: int

    def to_dict(self) -> dict:
        return {"qid": self.identifier, "name": self.display_name, "member_id": self.member_id}


@dataclass(frozen=True)
class MatchResult:
    matched: list[MatchedCandidate] = field(default_factory=list)
    unmatched: list[CandidateRecord] = field(default_factory=list)
    # Rows repeating an identifier already seen earlier in the same sheet.
    duplicates: list[CandidateRecord] = field(default_factory=list)

    def matched_member_ids(self) -> list[int]:
        return [m.member_id for m in self.matched]
