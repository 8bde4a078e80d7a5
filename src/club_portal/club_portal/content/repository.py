from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ContentSection
from .model import ContentItem


class ContentRepository(Protocol):
    def list_items(self, section: ContentSection, *, category: Optional[str] = None) -> Sequence[ContentItem]:
        """Newest first."""

        raise NotImplementedError

    def get_item(self, section: ContentSection, item_id: int) -> Optional[ContentItem]:
        raise NotImplementedError

    def create_item(self, section: ContentSection, fields: dict[str, Optional[str]]) -> int:
        raise NotImplementedError

    def delete_item(self, section: ContentSection, item_id: int) -> bool:
        raise NotImplementedError
