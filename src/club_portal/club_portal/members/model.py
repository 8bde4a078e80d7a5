from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import MemberStatus, RequestStatus, Role


@dataclass(frozen=True)
class Member:
    """Domain entity: a registered club member.

    `qid` is the institution-issued registration code; it is the join key for
    uploaded attendance sheets and never changes once assigned.
    """

    member_id: int
    qid: str
    uid: str
    name: str
    email: str
    status: MemberStatus = MemberStatus.PENDING
    role: Role = Role.MEMBER
    phone: Optional[str] = None
    gender: Optional[str] = None
    course: Optional[str] = None
    branch: Optional[str] = None
    section: Optional[str] = None
    hosteler_status: Optional[str] = None
    profile_photo: Optional[str] = None
    created_at: Optional[datetime] = None
    password_hash: str = ""

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "qid": self.qid,
            "uid": self.uid,
            "name": self.name,
            "email": self.email,
            "status": self.status.value,
            "role": self.role.value,
            "phone": self.phone,
            "gender": self.gender,
            "course": self.course,
            "branch": self.branch,
            "section": self.section,
            "hosteler_status": self.hosteler_status,
            "profile_photo": self.profile_photo,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class NewMember:
    """Onboarding form after validation."""

    qid: str
    uid: str
    name: str
    email: str
    password_hash: str
    phone: Optional[str] = None
    gender: Optional[str] = None
    course: Optional[str] = None
    branch: Optional[str] = None
    section: Optional[str] = None
    hosteler_status: Optional[str] = None
    profile_photo: Optional[str] = None


# Fields a member may ask an admin to change.
UPDATABLE_FIELDS = ("phone", "course", "branch", "section", "gender")


@dataclass(frozen=True)
class ProfileUpdateRequest:
    request_id: int
    member_id: int
    status: RequestStatus
    phone: Optional[str] = None
    course: Optional[str] = None
    branch: Optional[str] = None
    section: Optional[str] = None
    gender: Optional[str] = None
    created_at: Optional[datetime] = None

    def proposed(self) -> dict[str, Optional[str]]:
        return {f: getattr(self, f) for f in UPDATABLE_FIELDS}
