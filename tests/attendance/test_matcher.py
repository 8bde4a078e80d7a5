from __future__ import annotations

from src.club_portal.club_portal.attendance.matcher import match_candidates
from src.club_portal.club_portal.attendance.model import CandidateRecord
from src.club_portal.club_portal.members.model import Member


def _member(member_id: int, qid: str, name: str) -> Member:
    return Member(member_id=member_id, qid=qid, uid=f"P{qid}", name=name, email=f"{qid}@x")


def test_partition_into_matched_and_unmatched():
    members = [_member(10, "Q1", "Ravi Kumar"), _member(11, "Q2", "Meera Nair")]
    candidates = [
        CandidateRecord("Q1", "ravi"),
        CandidateRecord("Q9", "Walk-in"),
        CandidateRecord("Q2", "M. Nair"),
    ]

    result = match_candidates(candidates, members)

    assert [(m.identifier, m.member_id) for m in result.matched] == [("Q1", 10), ("Q2", 11)]
    assert [c.identifier for c in result.unmatched] == ["Q9"]
    assert result.unmatched[0].display_name == "Walk-in"
    assert result.duplicates == []


def test_matched_rows_take_the_registry_name():
    result = match_candidates([CandidateRecord("Q1", "typo name")], [_member(10, "Q1", "Ravi Kumar")])
    assert result.matched[0].display_name == "Ravi Kumar"


def test_comparison_is_case_sensitive():
    result = match_candidates([CandidateRecord("q1", "Ravi")], [_member(10, "Q1", "Ravi Kumar")])
    assert result.matched == []
    assert [c.identifier for c in result.unmatched] == ["q1"]


def test_repeated_identifier_is_matched_once():
    members = [_member(10, "Q1", "Ravi Kumar")]
    candidates = [CandidateRecord("Q1", "Ravi"), CandidateRecord("Q1", "Ravi (again)"), CandidateRecord("Q7", "X")]

    result = match_candidates(candidates, members)

    assert result.matched_member_ids() == [10]
    assert [c.display_name for c in result.duplicates] == ["Ravi (again)"]
    assert len(result.matched) + len(result.unmatched) + len(result.duplicates) == len(candidates)


def test_empty_registry_leaves_everything_unmatched():
    result = match_candidates([CandidateRecord("Q1", "A")], [])
    assert result.matched == []
    assert len(result.unmatched) == 1
