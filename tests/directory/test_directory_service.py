from __future__ import annotations

from datetime import timedelta

import pytest

from src.club_portal.club_portal.attendance.model import AttendanceRecord
from src.club_portal.club_portal.core.enums import AttendanceStatus, EventType
from src.club_portal.club_portal.core.exceptions import NotFoundError


@pytest.fixture
def roster(members_repo, events_repo, attendance_repo, now):
    events = [events_repo.add(f"Visit {i}", now - timedelta(days=10 - i), EventType.VISIT) for i in range(4)]
    events_repo.add("Next Visit", now + timedelta(days=3), EventType.VISIT)

    ravi = members_repo.add(qid="Q1", name="ravi Kumar")
    meera = members_repo.add(qid="Q2", name="Meera Nair")
    for e in events[:3]:
        attendance_repo.upsert_attendance([AttendanceRecord(e.event_id, ravi.member_id)])
    attendance_repo.upsert_attendance([AttendanceRecord(events[0].event_id, meera.member_id)])
    return ravi, meera, events


def test_directory_lists_everyone_with_stats(container, roster):
    ravi, meera, _ = roster

    entries = container.directory_service.list_members()

    by_id = {e.member.member_id: e for e in entries}
    assert (by_id[ravi.member_id].stats.percentage, by_id[ravi.member_id].stats.eligible) == (75, True)
    assert (by_id[meera.member_id].stats.percentage, by_id[meera.member_id].stats.eligible) == (25, False)
    assert [e.member.name for e in entries] == ["Asha Admin", "Meera Nair", "ravi Kumar"]


def test_low_attendance_filter(container, roster):
    _, meera, _ = roster
    low = container.directory_service.list_members(low_attendance=True)
    assert meera.member_id in {e.member.member_id for e in low}
    assert all(not e.stats.eligible for e in low)


def test_search(container, roster):
    entries = container.directory_service.list_members(search="KUMAR")
    assert [e.member.qid for e in entries] == ["Q1"]


def test_member_detail(container, roster):
    ravi, _, events = roster

    detail = container.directory_service.member_detail(ravi.member_id)

    assert detail["profile"]["qid"] == "Q1"
    assert detail["stats"] == {"attended": 3, "total": 4, "percentage": 75, "eligible": True}
    statuses = {h["event_id"]: h["status"] for h in detail["history"]}
    assert statuses[events[3].event_id] == AttendanceStatus.ABSENT.value
    assert statuses[events[0].event_id] == AttendanceStatus.PRESENT.value
    assert len(detail["history"]) == 4


def test_detail_and_directory_agree(container, roster):
    for entry in container.directory_service.list_members():
        detail = container.directory_service.member_detail(entry.member.member_id)
        assert detail["stats"]["percentage"] == entry.stats.percentage


def test_member_detail_unknown(container):
    with pytest.raises(NotFoundError):
        container.directory_service.member_detail(404)
