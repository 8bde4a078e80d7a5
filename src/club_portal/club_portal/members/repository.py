from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import MemberStatus, RequestStatus
from .model import Member, NewMember, ProfileUpdateRequest


class MemberRepository(Protocol):
    """Repository interface for members and their profile update requests.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, member_id: int) -> Optional[Member]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Member]:
        raise NotImplementedError

    def get_by_qid(self, qid: str) -> Optional[Member]:
        raise NotImplementedError

    def find_by_identifiers(self, identifiers: Sequence[str]) -> Sequence[Member]:
        """Registry lookup by QID IN (...). Unknown identifiers are simply absent."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Member]:
        raise NotImplementedError

    def list_by_status(self, status: MemberStatus) -> Sequence[Member]:
        raise NotImplementedError

    def create(self, member: NewMember) -> int:
        raise NotImplementedError

    def set_status(self, member_id: int, status: MemberStatus) -> bool:
        raise NotImplementedError

    def update_fields(self, member_id: int, fields: dict[str, str]) -> bool:
        raise NotImplementedError

    def create_update_request(self, *, member_id: int, proposed: dict[str, Optional[str]]) -> int:
        raise NotImplementedError

    def get_update_request(self, request_id: int) -> Optional[ProfileUpdateRequest]:
        raise NotImplementedError

    def list_pending_update_requests(self) -> Sequence[ProfileUpdateRequest]:
        raise NotImplementedError

    def set_update_request_status(self, request_id: int, status: RequestStatus) -> bool:
        raise NotImplementedError
