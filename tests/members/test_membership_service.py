from __future__ import annotations

import pytest

from src.club_portal.club_portal.core.enums import AuditAction, MemberStatus, RequestStatus
from src.club_portal.club_portal.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from src.club_portal.club_portal.members.service import OnboardingForm, matches_search


def _form(**overrides) -> OnboardingForm:
    data = dict(name="Ravi Kumar", email="Ravi@Example.com", password="secret1", qid="Q100")
    data.update(overrides)
    return OnboardingForm(**data)


def test_onboard_creates_pending_member(container, members_repo):
    member_id = container.membership_service.onboard(_form())

    member = members_repo.get_by_id(member_id)
    assert member.status == MemberStatus.PENDING
    assert member.uid == "PQ100"
    assert member.email == "ravi@example.com"
    assert member.branch == "NA"
    assert member.hosteler_status == "Day Scholar"
    assert member.password_hash != "secret1"


@pytest.mark.parametrize(
    "overrides",
    [{"name": " "}, {"qid": ""}, {"password": "123"}, {"qid": "ADM001"}, {"email": "admin@club.local"}],
)
def test_onboard_rejects(container, overrides):
    with pytest.raises(ValidationError):
        container.membership_service.onboard(_form(**overrides))


def test_login_after_onboarding(container):
    container.membership_service.onboard(_form())
    s_member = container.auth_service.authenticate("ravi@example.com", "secret1")
    assert s_member.status == MemberStatus.PENDING

    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("ravi@example.com", "wrong")
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("nobody@example.com", "secret1")


def test_banned_member_cannot_login(container, admin):
    member_id = container.membership_service.onboard(_form())
    container.membership_service.change_status(actor=admin, member_id=member_id, new_status=MemberStatus.BANNED)

    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("ravi@example.com", "secret1")


def test_change_status_is_audited(container, admin, audit_repo):
    member_id = container.membership_service.onboard(_form())

    container.membership_service.change_status(actor=admin, member_id=member_id, new_status=MemberStatus.APPROVED)

    entry = audit_repo.entries[-1]
    assert entry.action == AuditAction.APPROVED_USER
    assert entry.details == "Asha Admin changed Ravi Kumar's status to APPROVED."


def test_approving_an_approved_member_is_a_no_op(container, members_repo, admin, audit_repo):
    member_id = container.membership_service.onboard(_form())
    container.membership_service.change_status(actor=admin, member_id=member_id, new_status=MemberStatus.APPROVED)
    entries = len(audit_repo.entries)

    container.membership_service.change_status(actor=admin, member_id=member_id, new_status=MemberStatus.APPROVED)

    assert members_repo.get_by_id(member_id).status == MemberStatus.APPROVED
    assert len(audit_repo.entries) == entries


def test_admin_cannot_be_banned(container, admin):
    with pytest.raises(ValidationError):
        container.membership_service.change_status(actor=admin, member_id=1, new_status=MemberStatus.BANNED)


def test_list_for_review_filters(container, members_repo):
    members_repo.add(qid="Q1", name="Ravi Kumar", status=MemberStatus.PENDING)
    members_repo.add(qid="Q2", name="Meera Nair", status=MemberStatus.PENDING)

    found = container.membership_service.list_for_review(MemberStatus.PENDING, search="meera")
    assert [m.qid for m in found] == ["Q2"]
    assert len(container.membership_service.list_for_review(MemberStatus.PENDING)) == 2


def test_matches_search_fields(members_repo):
    ravi = members_repo.add(qid="Q77X", name="Ravi Kumar")
    assert matches_search(ravi, "KUMAR")
    assert matches_search(ravi, "pq77x")
    assert matches_search(ravi, "77X")
    assert matches_search(ravi, "")


def test_profile_update_request_flow(container, members_repo, admin, audit_repo):
    ravi = members_repo.add(qid="Q1", name="Ravi", phone="111", branch="CSE")
    svc = container.membership_service

    rid = svc.request_profile_update(member_id=ravi.member_id, proposed={"phone": "222", "branch": "CSE"})
    assert [r.request_id for r in svc.pending_update_requests()] == [rid]

    changes = svc.decide_update_request(actor=admin, request_id=rid, approve=True)

    assert changes == {"phone": "222"}
    assert members_repo.get_by_id(ravi.member_id).phone == "222"
    assert members_repo.get_update_request(rid).status == RequestStatus.APPROVED
    assert audit_repo.entries[-1].action == AuditAction.APPROVED_PROFILE_UPDATE

    with pytest.raises(ValidationError):
        svc.decide_update_request(actor=admin, request_id=rid, approve=False)


def test_rejected_update_changes_nothing(container, members_repo, admin):
    ravi = members_repo.add(qid="Q1", name="Ravi", phone="111")
    svc = container.membership_service
    rid = svc.request_profile_update(member_id=ravi.member_id, proposed={"phone": "222"})

    assert svc.decide_update_request(actor=admin, request_id=rid, approve=False) == {}
    assert members_repo.get_by_id(ravi.member_id).phone == "111"


def test_empty_update_request(container, members_repo):
    ravi = members_repo.add(qid="Q1", name="Ravi")
    with pytest.raises(ValidationError):
        container.membership_service.request_profile_update(member_id=ravi.member_id, proposed={"phone": "  "})


def test_unknown_update_request(container, admin):
    with pytest.raises(NotFoundError):
        container.membership_service.decide_update_request(actor=admin, request_id=9, approve=True)
