from __future__ import annotations

import csv
import io
from datetime import datetime, timedelta

import pytest

from src.club_portal.club_portal.core.constants import EXPORT_COLUMNS
from src.club_portal.club_portal.core.enums import AuditAction, EventType
from src.club_portal.club_portal.core.exceptions import NotFoundError, ValidationError
from src.club_portal.club_portal.events.service import export_filename


def test_create_event_is_audited(container, admin, audit_repo, now):
    event_id = container.event_service.create_event(
        actor=admin,
        title="Blood Donation",
        event_type="Campaign",
        date=now + timedelta(days=3),
        location="Main Hall",
    )

    event = container.event_service.get_event(event_id)
    assert event.event_type == EventType.CAMPAIGN
    assert event.location == "Main Hall"
    assert event.description is None
    assert audit_repo.entries[0].action == AuditAction.CREATED_EVENT
    assert audit_repo.entries[0].details == "Created a new Campaign: Blood Donation"


@pytest.mark.parametrize(
    "title,event_type,date",
    [("", "Visit", datetime(2026, 4, 1)), ("Visit", "Picnic", datetime(2026, 4, 1)), ("Visit", "Visit", None)],
)
def test_create_event_validation(container, admin, title, event_type, date):
    with pytest.raises(ValidationError):
        container.event_service.create_event(actor=admin, title=title, event_type=event_type, date=date)


def test_delete_unknown_event(container, admin):
    with pytest.raises(NotFoundError):
        container.event_service.delete_event(actor=admin, event_id=99)


def test_listing_splits_upcoming_and_past(container, events_repo, members_repo, now):
    ravi = members_repo.add(qid="Q1", name="Ravi")
    old = events_repo.add("Old Visit", now - timedelta(days=10), EventType.VISIT)
    older = events_repo.add("Older Visit", now - timedelta(days=20), EventType.VISIT)
    soon = events_repo.add("Next Visit", now + timedelta(days=2), EventType.VISIT)
    events_repo.add("Fest", now + timedelta(days=2), EventType.EVENT)
    container.event_service.toggle_rsvp(member_id=ravi.member_id, event_id=soon.event_id)

    listing = container.event_service.listing_for_member(member_id=ravi.member_id, kind="drives")

    assert [e.event_id for e in listing.upcoming] == [soon.event_id]
    assert [e.event_id for e in listing.past] == [old.event_id, older.event_id]
    assert listing.rsvp_event_ids == {soon.event_id}


def test_unknown_listing(container):
    with pytest.raises(ValidationError):
        container.event_service.listing_for_member(member_id=1, kind="parties")


def test_rsvp_toggles(container, events_repo, members_repo, now):
    ravi = members_repo.add(qid="Q1", name="Ravi")
    event = events_repo.add("Fest", now + timedelta(days=2), EventType.EVENT)
    svc = container.event_service

    assert svc.toggle_rsvp(member_id=ravi.member_id, event_id=event.event_id) is True
    assert [r.member_id for r in svc.list_registrants(event.event_id)] == [ravi.member_id]
    assert svc.toggle_rsvp(member_id=ravi.member_id, event_id=event.event_id) is False
    assert svc.list_registrants(event.event_id) == []


def test_export_registrants(container, events_repo, members_repo, now):
    ravi = members_repo.add(qid="Q1", name="Ravi", course="BTech", branch="CSE", phone="98765", hosteler_status="Hosteler")
    meera = members_repo.add(qid="Q2", name="Meera")
    event = events_repo.add("Village  Visit March", now + timedelta(days=2), EventType.VISIT)
    for m in (ravi, meera):
        container.event_service.toggle_rsvp(member_id=m.member_id, event_id=event.event_id)

    export = container.event_service.export_registrants(event.event_id)

    assert export.filename == "RSVP_Village_Visit_March.csv"
    assert export.row_count == 2
    rows = list(csv.DictReader(io.StringIO(export.content)))
    assert list(rows[0].keys()) == list(EXPORT_COLUMNS)
    assert rows[0] == {
        "S.No": "1",
        "Name": "Ravi",
        "QID": "Q1",
        "Course": "BTech",
        "Branch": "CSE",
        "Phone": "98765",
        "Housing": "Hosteler",
        "Attendance": "",
    }
    assert rows[1]["S.No"] == "2"
    assert rows[1]["Course"] == ""


def test_export_without_rsvps(container, events_repo, now):
    event = events_repo.add("Quiet", now, EventType.MEETING)
    with pytest.raises(ValidationError):
        container.event_service.export_registrants(event.event_id)


def test_export_filename():
    assert export_filename("Tree Plantation Drive") == "RSVP_Tree_Plantation_Drive.csv"


def test_announcements(container, admin, audit_repo):
    svc = container.event_service
    aid = svc.post_announcement(actor=admin, title="Meeting moved", content="Now at 5pm", urgency="urgent")

    assert [a.title for a in svc.list_announcements()] == ["Meeting moved"]
    svc.delete_announcement(actor=admin, announcement_id=aid)
    assert svc.list_announcements() == []
    assert [e.action for e in audit_repo.entries] == [AuditAction.CREATED_NOTICE, AuditAction.DELETED_NOTICE]

    with pytest.raises(ValidationError):
        svc.post_announcement(actor=admin, title="x", content="y", urgency="panic")
