from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from .analytics.service import AnalyticsService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.reconciliation import ReconciliationService
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.session import ReconciliationSessionStore
from .audit.mysql_audit_repository import MySQLAuditRepository
from .audit.repository import AuditRepository
from .audit.service import AuditService
from .content.mysql_content_repository import MySQLContentRepository
from .content.repository import ContentRepository
from .content.service import ContentService
from .core.constants import RECONCILIATION_TTL_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .directory.service import DirectoryService
from .events.mysql_event_repository import MySQLAnnouncementRepository, MySQLEventRepository
from .events.repository import AnnouncementRepository, EventRepository
from .events.service import EventService
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import MemberRepository
from .members.service import AuthService, MembershipService


@dataclass(frozen=True)
class Container:
    members_repo: MemberRepository
    events_repo: EventRepository
    announcements_repo: AnnouncementRepository
    attendance_repo: AttendanceRepository
    audit_repo: AuditRepository
    content_repo: ContentRepository

    audit_service: AuditService
    auth_service: AuthService
    membership_service: MembershipService
    event_service: EventService
    attendance_service: AttendanceService
    reconciliation_service: ReconciliationService
    directory_service: DirectoryService
    analytics_service: AnalyticsService
    content_service: ContentService


def build_services(
    *,
    members_repo: MemberRepository,
    events_repo: EventRepository,
    announcements_repo: AnnouncementRepository,
    attendance_repo: AttendanceRepository,
    audit_repo: AuditRepository,
    content_repo: ContentRepository,
    clock=None,
    session_ttl: Optional[timedelta] = None,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, fakes in tests)."""
    audit_service = AuditService(audit_repo, clock=clock)

    return Container(
        members_repo=members_repo,
        events_repo=events_repo,
        announcements_repo=announcements_repo,
        attendance_repo=attendance_repo,
        audit_repo=audit_repo,
        content_repo=content_repo,
        audit_service=audit_service,
        auth_service=AuthService(members_repo),
        membership_service=MembershipService(members_repo, audit_service),
        event_service=EventService(events_repo, announcements_repo, audit_service, clock=clock),
        attendance_service=AttendanceService(attendance_repo, events_repo, members_repo, audit_service, clock=clock),
        reconciliation_service=ReconciliationService(
            members_repo,
            events_repo,
            attendance_repo,
            audit_service,
            store=ReconciliationSessionStore(
                ttl=session_ttl or timedelta(minutes=RECONCILIATION_TTL_MINUTES),
                clock=clock,
            ),
            clock=clock,
        ),
        directory_service=DirectoryService(members_repo, events_repo, attendance_repo, clock=clock),
        analytics_service=AnalyticsService(members_repo, events_repo, clock=clock),
        content_service=ContentService(content_repo, audit_service),
    )


def build_container(*, db_config: dict, session_ttl: Optional[timedelta] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        members_repo=MySQLMemberRepository(conn),
        events_repo=MySQLEventRepository(conn),
        announcements_repo=MySQLAnnouncementRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        audit_repo=MySQLAuditRepository(conn),
        content_repo=MySQLContentRepository(conn),
        session_ttl=session_ttl,
    )
