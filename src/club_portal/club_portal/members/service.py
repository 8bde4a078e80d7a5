from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..audit.model import Actor
from ..audit.service import AuditService
from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.constants import DEFAULT_BRANCH, DEFAULT_HOUSING, UID_PREFIX
from ..core.enums import AuditAction, MemberStatus, RequestStatus, Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import UPDATABLE_FIELDS, Member, NewMember, ProfileUpdateRequest
from .repository import MemberRepository

logger = logging.getLogger(__name__)

_STATUS_ACTIONS = {
    MemberStatus.APPROVED: AuditAction.APPROVED_USER,
    MemberStatus.REJECTED: AuditAction.REJECTED_USER,
    MemberStatus.BANNED: AuditAction.BANNED_USER,
    MemberStatus.PENDING: AuditAction.UNBANNED_USER,
}


@dataclass(frozen=True)
class SessionMember:
    """What we store into Flask session after login."""

    member_id: int
    name: str
    role: Role
    status: MemberStatus


class AuthService:
    """Use case: verify credentials (login)."""

    def __init__(self, members: MemberRepository):
        self._members = members

    def authenticate(self, email: str, password: str) -> SessionMember:
        member = self._members.get_by_email((email or "").strip().lower())
        if not member or member.status == MemberStatus.BANNED:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(member.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            logger.warning("Failed login for member %s", member.member_id)
            raise AuthenticationError("Invalid email or password")

        return SessionMember(member_id=member.member_id, name=member.name, role=member.role, status=member.status)


@dataclass(frozen=True)
class OnboardingForm:
    name: str
    email: str
    password: str
    qid: str
    phone: str = ""
    gender: str = ""
    course: str = ""
    branch: str = ""
    section: str = ""
    hosteler_status: str = ""
    profile_photo: str = ""


def matches_search(member: Member, query: str) -> bool:
    """Name and uid match case-insensitively, qid as a plain substring."""
    q = (query or "").strip()
    if not q:
        return True
    lowered = q.lower()
    return (
        lowered in (member.name or "").lower()
        or lowered in (member.uid or "").lower()
        or q in (member.qid or "")
    )


class MembershipService:
    """Use cases: onboarding, approvals and profile change requests."""

    def __init__(self, members: MemberRepository, audit: AuditService):
        self._members = members
        self._audit = audit

    def onboard(self, form: OnboardingForm) -> int:
        name = require_non_empty(form.name, "Name")
        email = require_non_empty(form.email, "Email").lower()
        qid = require_non_empty(form.qid, "QID")
        require_min_length(form.password, "Password", 6)

        if self._members.get_by_qid(qid):
            raise ValidationError("This QID is already registered")
        if self._members.get_by_email(email):
            raise ValidationError("This email is already registered")

        member_id = self._members.create(
            NewMember(
                qid=qid,
                uid=f"{UID_PREFIX}{qid}",
                name=name,
                email=email,
                password_hash=generate_password_hash(form.password),
                phone=optional_text(form.phone),
                gender=optional_text(form.gender),
                course=optional_text(form.course),
                branch=optional_text(form.branch) or DEFAULT_BRANCH,
                section=optional_text(form.section),
                hosteler_status=optional_text(form.hosteler_status) or DEFAULT_HOUSING,
                profile_photo=optional_text(form.profile_photo),
            )
        )
        logger.info("Onboarded member %s (qid=%s), awaiting approval", member_id, qid)
        return member_id

    def get_member(self, member_id: int) -> Member:
        member = self._members.get_by_id(int(member_id))
        if not member:
            raise NotFoundError("Member not found")
        return member

    def list_for_review(self, status: MemberStatus, *, search: str = "") -> list[Member]:
        return [m for m in self._members.list_by_status(status) if matches_search(m, search)]

    def change_status(self, *, actor: Actor, member_id: int, new_status: MemberStatus) -> None:
        member = self.get_member(member_id)
        if member.role == Role.ADMIN and new_status != MemberStatus.APPROVED:
            raise ValidationError("Admin accounts cannot be suspended from here")
        if member.status == new_status:
            return

        if not self._members.set_status(member.member_id, new_status):
            raise ValidationError("Status update failed")

        action = _STATUS_ACTIONS.get(new_status, AuditAction.UPDATED_USER)
        self._audit.record(
            actor,
            action,
            f"{actor.name} changed {member.name}'s status to {new_status.value.upper()}.",
        )

    def request_profile_update(self, *, member_id: int, proposed: dict[str, str]) -> int:
        cleaned = {f: optional_text(proposed.get(f)) for f in UPDATABLE_FIELDS}
        if not any(cleaned.values()):
            raise ValidationError("Please enter at least one change")
        self.get_member(member_id)
        return self._members.create_update_request(member_id=int(member_id), proposed=cleaned)

    def pending_update_requests(self) -> Sequence[ProfileUpdateRequest]:
        return self._members.list_pending_update_requests()

    def decide_update_request(self, *, actor: Actor, request_id: int, approve: bool) -> dict[str, str]:
        """Apply (or reject) a pending request. Returns the fields actually changed."""
        req = self._members.get_update_request(int(request_id))
        if not req:
            raise NotFoundError("Request not found")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Request has already been handled")

        member = self.get_member(req.member_id)
        changes: dict[str, str] = {}
        if approve:
            for field, value in req.proposed().items():
                if value and value != getattr(member, field):
                    changes[field] = value
            if changes and not self._members.update_fields(member.member_id, changes):
                raise ValidationError("Failed to update member profile")

        status = RequestStatus.APPROVED if approve else RequestStatus.REJECTED
        self._members.set_update_request_status(req.request_id, status)

        if approve:
            self._audit.record(
                actor,
                AuditAction.APPROVED_PROFILE_UPDATE,
                f"Updated {member.name}'s profile ({', '.join(sorted(changes)) or 'no changes'}).",
            )
        else:
            self._audit.record(actor, AuditAction.REJECTED_PROFILE_UPDATE, f"Rejected {member.name}'s profile update.")
        return changes
