from __future__ import annotations

from typing import Optional, Sequence

from ..audit.model import Actor
from ..audit.service import AuditService
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_TEAM_CATEGORY
from ..core.enums import AuditAction, ContentSection, GalleryCategory
from ..core.exceptions import NotFoundError, ValidationError
from .model import SECTION_FIELDS, SECTION_FILE_FIELD, ContentItem
from .repository import ContentRepository


def parse_section(value: str) -> ContentSection:
    try:
        return ContentSection(value)
    except ValueError:
        raise ValidationError(f"Unknown content section: {value}")


class ContentService:
    """Use cases: site content (gallery, legacy, team, syllabus).

    Files are hosted elsewhere; items carry the public URL of their file.
    """

    def __init__(self, content: ContentRepository, audit: AuditService):
        self._content = content
        self._audit = audit

    def list_items(self, section: ContentSection, *, category: Optional[str] = None) -> Sequence[ContentItem]:
        if category == "all":
            category = None
        return self._content.list_items(section, category=category)

    def _clean(self, section: ContentSection, form: dict) -> dict[str, Optional[str]]:
        fields = {f: optional_text(form.get(f)) for f in SECTION_FIELDS[section]}

        file_field = SECTION_FILE_FIELD[section]
        if not fields[file_field] and section != ContentSection.TEAM:
            raise ValidationError("Please select a file first.")

        if section == ContentSection.GALLERY:
            try:
                fields["category"] = GalleryCategory(fields["category"] or GalleryCategory.VILLAGE.value).value
            except ValueError:
                raise ValidationError("Gallery category must be village or college")
        elif section == ContentSection.LEGACY:
            fields["name"] = require_non_empty(fields["name"], "Name")
        elif section == ContentSection.TEAM:
            fields["name"] = require_non_empty(fields["name"], "Name")
            fields["role"] = require_non_empty(fields["role"], "Role")
            fields["category"] = fields["category"] or DEFAULT_TEAM_CATEGORY
        elif section == ContentSection.SYLLABUS:
            fields["title"] = require_non_empty(fields["title"], "Title")
        return fields

    @staticmethod
    def _publish_details(section: ContentSection, fields: dict[str, Optional[str]]) -> str:
        if section == ContentSection.GALLERY:
            return f"Uploaded new photo to {fields['category']} gallery."
        if section == ContentSection.LEGACY:
            return f"Added legacy profile for {fields['name']}."
        if section == ContentSection.TEAM:
            return f"Added team member: {fields['name']} ({fields['role']})."
        return f"Uploaded resource: {fields['title']}."

    def publish(self, *, actor: Actor, section: ContentSection, form: dict) -> int:
        fields = self._clean(section, form)
        item_id = self._content.create_item(section, fields)
        self._audit.record(actor, AuditAction.PUBLISHED_CONTENT, self._publish_details(section, fields))
        return item_id

    def remove(self, *, actor: Actor, section: ContentSection, item_id: int) -> None:
        item = self._content.get_item(section, int(item_id))
        if not item:
            raise NotFoundError("Content item not found")
        self._content.delete_item(section, item.item_id)
        self._audit.record(
            actor,
            AuditAction.DELETED_CONTENT,
            f"Removed content from {section.value}: {item.label}",
        )
