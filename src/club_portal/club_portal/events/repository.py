from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EventType, Urgency
from .model import Announcement, Event, EventWithAttendance, NewEvent, Registrant


class EventRepository(Protocol):
    def get_by_id(self, event_id: int) -> Optional[Event]:
        raise NotImplementedError

    def list_all(self, *, types: Optional[Sequence[EventType]] = None) -> Sequence[Event]:
        """Events ordered by date ascending, optionally restricted to some types."""

        raise NotImplementedError

    def list_with_attendance_counts(self) -> Sequence[EventWithAttendance]:
        raise NotImplementedError

    def create(self, event: NewEvent) -> int:
        raise NotImplementedError

    def delete(self, event_id: int) -> bool:
        raise NotImplementedError

    def list_registrants(self, event_id: int) -> Sequence[Registrant]:
        """RSVP'd members ordered by registration time."""

        raise NotImplementedError

    def list_rsvp_event_ids(self, member_id: int) -> Sequence[int]:
        raise NotImplementedError

    def add_rsvp(self, *, event_id: int, member_id: int) -> None:
        raise NotImplementedError

    def remove_rsvp(self, *, event_id: int, member_id: int) -> bool:
        raise NotImplementedError


class AnnouncementRepository(Protocol):
    def list_recent(self) -> Sequence[Announcement]:
        raise NotImplementedError

    def get_by_id(self, announcement_id: int) -> Optional[Announcement]:
        raise NotImplementedError

    def create(self, *, title: str, content: str, urgency: Urgency) -> int:
        raise NotImplementedError

    def delete(self, announcement_id: int) -> bool:
        raise NotImplementedError
