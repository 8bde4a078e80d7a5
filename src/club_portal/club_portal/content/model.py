from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import ContentSection

# Columns stored per CMS section.
SECTION_FIELDS: dict[ContentSection, tuple[str, ...]] = {
    ContentSection.GALLERY: ("image_url", "caption", "category"),
    ContentSection.LEGACY: ("name", "term", "bio", "image_url"),
    ContentSection.TEAM: ("name", "role", "category", "quote", "image_url"),
    ContentSection.SYLLABUS: ("title", "file_url"),
}

SECTION_FILE_FIELD: dict[ContentSection, str] = {
    ContentSection.GALLERY: "image_url",
    ContentSection.LEGACY: "image_url",
    ContentSection.TEAM: "image_url",
    ContentSection.SYLLABUS: "file_url",
}

_LABEL_FIELD: dict[ContentSection, str] = {
    ContentSection.GALLERY: "caption",
    ContentSection.LEGACY: "name",
    ContentSection.TEAM: "name",
    ContentSection.SYLLABUS: "title",
}


@dataclass(frozen=True)
class ContentItem:
    item_id: int
    section: ContentSection
    fields: dict[str, Optional[str]] = field(default_factory=dict)
    created_at: Optional[datetime] = None

    @property
    def label(self) -> str:
        return self.fields.get(_LABEL_FIELD[self.section]) or f"#{self.item_id}"

    @property
    def file_url(self) -> Optional[str]:
        return self.fields.get(SECTION_FILE_FIELD[self.section])

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "section": self.section.value,
            **self.fields,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
