from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Member role used for authorization."""

    ADMIN = "admin"
    MEMBER = "member"


class MemberStatus(str, Enum):
    """Membership lifecycle: onboarding creates PENDING, admins decide the rest."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    BANNED = "banned"


class RequestStatus(str, Enum):
    """Review state of a profile update request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"


class EventType(str, Enum):
    VISIT = "Visit"
    EVENT = "Event"
    MEETING = "Meeting"
    CAMPAIGN = "Campaign"


class Urgency(str, Enum):
    NORMAL = "normal"
    URGENT = "urgent"


class ContentSection(str, Enum):
    GALLERY = "gallery"
    LEGACY = "legacy"
    TEAM = "team"
    SYLLABUS = "syllabus"


class GalleryCategory(str, Enum):
    VILLAGE = "village"
    COLLEGE = "college"


class AuditAction(str, Enum):
    """Action kinds written to the audit log."""

    APPROVED_USER = "APPROVED_USER"
    REJECTED_USER = "REJECTED_USER"
    BANNED_USER = "BANNED_USER"
    UNBANNED_USER = "UNBANNED_USER"
    UPDATED_USER = "UPDATED_USER"
    APPROVED_PROFILE_UPDATE = "APPROVED_PROFILE_UPDATE"
    REJECTED_PROFILE_UPDATE = "REJECTED_PROFILE_UPDATE"
    CREATED_EVENT = "CREATED_EVENT"
    DELETED_EVENT = "DELETED_EVENT"
    CREATED_NOTICE = "CREATED_NOTICE"
    DELETED_NOTICE = "DELETED_NOTICE"
    BULK_ATTENDANCE = "BULK_ATTENDANCE"
    MANUAL_ATTENDANCE_EDIT = "MANUAL_ATTENDANCE_EDIT"
    PUBLISHED_CONTENT = "PUBLISHED_CONTENT"
    DELETED_CONTENT = "DELETED_CONTENT"
