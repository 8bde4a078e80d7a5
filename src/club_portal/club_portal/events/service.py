from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..audit.model import Actor
from ..audit.service import AuditService
from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.constants import EXPORT_COLUMNS
from ..core.enums import AuditAction, EventType, Urgency
from ..core.exceptions import NotFoundError, ValidationError
from .model import Announcement, Event, NewEvent, Registrant
from .repository import AnnouncementRepository, EventRepository

logger = logging.getLogger(__name__)

# Member-facing listings: "events" are campus happenings, "drives" are village visits.
LISTING_TYPES: dict[str, tuple[EventType, ...]] = {
    "events": (EventType.EVENT, EventType.CAMPAIGN),
    "drives": (EventType.VISIT,),
}


@dataclass(frozen=True)
class EventListing:
    upcoming: list[Event]
    past: list[Event]
    rsvp_event_ids: set[int] = field(default_factory=set)


@dataclass(frozen=True)
class RegistrantExport:
    filename: str
    content: str
    row_count: int


def export_filename(title: str) -> str:
    slug = re.sub(r"\s+", "_", title)
    return f"RSVP_{slug}.csv"


class EventService:
    """Use cases: event and notice management, RSVPs and the registrant sheet."""

    def __init__(
        self,
        events: EventRepository,
        announcements: AnnouncementRepository,
        audit: AuditService,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._events = events
        self._announcements = announcements
        self._audit = audit
        self._clock = clock or now_local

    def get_event(self, event_id: int) -> Event:
        event = self._events.get_by_id(int(event_id))
        if not event:
            raise NotFoundError("Event not found")
        return event

    def list_all(self) -> Sequence[Event]:
        return self._events.list_all()

    def create_event(
        self,
        *,
        actor: Actor,
        title: str,
        event_type: str,
        date: Optional[datetime],
        location: str = "",
        description: str = "",
    ) -> int:
        title = require_non_empty(title, "Title")
        if date is None:
            raise ValidationError("Date is required")
        try:
            etype = EventType(event_type or EventType.VISIT.value)
        except ValueError:
            raise ValidationError("Unknown event type")

        event_id = self._events.create(
            NewEvent(
                title=title,
                event_type=etype,
                date=date,
                location=optional_text(location),
                description=optional_text(description),
            )
        )
        self._audit.record(actor, AuditAction.CREATED_EVENT, f"Created a new {etype.value}: {title}")
        return event_id

    def delete_event(self, *, actor: Actor, event_id: int) -> None:
        event = self.get_event(event_id)
        self._events.delete(event.event_id)
        self._audit.record(actor, AuditAction.DELETED_EVENT, f"Deleted event: {event.title}")

    def list_announcements(self) -> Sequence[Announcement]:
        return self._announcements.list_recent()

    def post_announcement(self, *, actor: Actor, title: str, content: str, urgency: str = "") -> int:
        title = require_non_empty(title, "Title")
        content = require_non_empty(content, "Content")
        try:
            level = Urgency(urgency or Urgency.NORMAL.value)
        except ValueError:
            raise ValidationError("Unknown urgency")

        announcement_id = self._announcements.create(title=title, content=content, urgency=level)
        self._audit.record(actor, AuditAction.CREATED_NOTICE, f"Posted announcement: {title}")
        return announcement_id

    def delete_announcement(self, *, actor: Actor, announcement_id: int) -> None:
        notice = self._announcements.get_by_id(int(announcement_id))
        if not notice:
            raise NotFoundError("Announcement not found")
        self._announcements.delete(notice.announcement_id)
        self._audit.record(actor, AuditAction.DELETED_NOTICE, f"Deleted announcement: {notice.title}")

    def listing_for_member(self, *, member_id: int, kind: str) -> EventListing:
        types = LISTING_TYPES.get(kind)
        if types is None:
            raise ValidationError(f"Unknown listing: {kind}")

        now = self._clock()
        upcoming: list[Event] = []
        past: list[Event] = []
        for event in self._events.list_all(types=types):
            if event.date > now:
                upcoming.append(event)
            else:
                past.append(event)
        past.reverse()

        return EventListing(
            upcoming=upcoming,
            past=past,
            rsvp_event_ids=set(self._events.list_rsvp_event_ids(int(member_id))),
        )

    def dashboard_feed(self, *, member_id: int) -> dict:
        return {
            "events": [e.to_dict() for e in self._events.list_all()],
            "announcements": [a.to_dict() for a in self._announcements.list_recent()],
            "rsvp_event_ids": sorted(self._events.list_rsvp_event_ids(int(member_id))),
        }

    def toggle_rsvp(self, *, member_id: int, event_id: int) -> bool:
        """Register if not yet registered, otherwise cancel. Returns the new state."""
        event = self.get_event(event_id)
        registered = event.event_id in set(self._events.list_rsvp_event_ids(int(member_id)))
        if registered:
            self._events.remove_rsvp(event_id=event.event_id, member_id=int(member_id))
            return False
        self._events.add_rsvp(event_id=event.event_id, member_id=int(member_id))
        return True

    def list_registrants(self, event_id: int) -> Sequence[Registrant]:
        event = self.get_event(event_id)
        return self._events.list_registrants(event.event_id)

    def export_registrants(self, event_id: int) -> RegistrantExport:
        event = self.get_event(event_id)
        registrants = self._events.list_registrants(event.event_id)
        if not registrants:
            raise ValidationError("No RSVPs to export.")

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=list(EXPORT_COLUMNS))
        writer.writeheader()
        for idx, r in enumerate(registrants, start=1):
            writer.writerow(
                {
                    "S.No": idx,
                    "Name": r.name,
                    "QID": r.qid,
                    "Course": r.course or "",
                    "Branch": r.branch or "",
                    "Phone": r.phone or "",
                    "Housing": r.hosteler_status or "",
                    "Attendance": "",
                }
            )

        logger.info("Exported %d registrants for event %s", len(registrants), event.event_id)
        return RegistrantExport(filename=export_filename(event.title), content=out.getvalue(), row_count=len(registrants))
