from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EventType, Urgency


@dataclass(frozen=True)
class Event:
    """Domain entity: a club event, drive, meeting or campaign."""

    event_id: int
    title: str
    event_type: EventType
    date: datetime
    location: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "event_id": self.event_id,
            "title": self.title,
            "type": self.event_type.value,
            "date": self.date.isoformat(),
            "location": self.location,
            "description": self.description,
        }


@dataclass(frozen=True)
class EventWithAttendance:
    """Read-model: an event plus how many attendance records reference it."""

    event: Event
    attendance_count: int


@dataclass(frozen=True)
class NewEvent:
    title: str
    event_type: EventType
    date: datetime
    location: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class Announcement:
    announcement_id: int
    title: str
    content: str
    urgency: Urgency
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "announcement_id": self.announcement_id,
            "title": self.title,
            "content": self.content,
            "urgency": self.urgency.value,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class Registrant:
    """Read-model for the RSVP export: one row per member who registered."""

    member_id: int
    name: str
    qid: str
    course: Optional[str]
    branch: Optional[str]
    phone: Optional[str]
    hosteler_status: Optional[str]
    registered_at: datetime
