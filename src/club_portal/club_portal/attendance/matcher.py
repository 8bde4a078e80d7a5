from __future__ import annotations

from typing import Iterable, Sequence

from ..members.model import Member
from .model import CandidateRecord, MatchedCandidate, MatchResult


def match_candidates(candidates: Sequence[CandidateRecord], members: Iterable[Member]) -> MatchResult:
    """Partition sheet rows by whether their identifier names a registered member.

    Comparison is exact and case-sensitive. A repeated identifier is matched
    once (first row wins); later repeats land in `duplicates` so each member
    is selected at most once.
    """
    by_qid = {m.qid: m for m in members}

    matched: list[MatchedCandidate] = []
    unmatched: list[CandidateRecord] = []
    duplicates: list[CandidateRecord] = []
    seen: set[str] = set()

    for c in candidates:
        if c.identifier in seen:
            duplicates.append(c)
            continue
        seen.add(c.identifier)

        member = by_qid.get(c.identifier)
        if member is None:
            unmatched.append(c)
        else:
            matched.append(MatchedCandidate(identifier=member.qid, display_name=member.name, member_id=member.member_id))

    return MatchResult(matched=matched, unmatched=unmatched, duplicates=duplicates)
