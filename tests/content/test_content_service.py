from __future__ import annotations

import pytest

from src.club_portal.club_portal.content.service import parse_section
from src.club_portal.club_portal.core.enums import AuditAction, ContentSection
from src.club_portal.club_portal.core.exceptions import NotFoundError, ValidationError


def test_publish_and_filter_gallery(container, admin, audit_repo):
    svc = container.content_service
    svc.publish(actor=admin, section=ContentSection.GALLERY, form={"image_url": "https://cdn/x.jpg", "category": "village"})
    svc.publish(actor=admin, section=ContentSection.GALLERY, form={"image_url": "https://cdn/y.jpg", "category": "college"})

    assert len(svc.list_items(ContentSection.GALLERY, category="all")) == 2
    village = svc.list_items(ContentSection.GALLERY, category="village")
    assert [i.file_url for i in village] == ["https://cdn/x.jpg"]
    assert audit_repo.entries[0].details == "Uploaded new photo to village gallery."


def test_team_member_defaults_category(container, admin):
    svc = container.content_service
    item_id = svc.publish(actor=admin, section=ContentSection.TEAM, form={"name": "Ravi", "role": "Lead"})
    item = svc.list_items(ContentSection.TEAM)[0]
    assert item.item_id == item_id
    assert item.fields["category"] == "Core Member"


@pytest.mark.parametrize(
    "section,form",
    [
        (ContentSection.GALLERY, {"caption": "no file"}),
        (ContentSection.GALLERY, {"image_url": "u", "category": "beach"}),
        (ContentSection.LEGACY, {"image_url": "u"}),
        (ContentSection.TEAM, {"name": "Ravi"}),
        (ContentSection.SYLLABUS, {"file_url": "u"}),
    ],
)
def test_publish_validation(container, admin, section, form):
    with pytest.raises(ValidationError):
        container.content_service.publish(actor=admin, section=section, form=form)


def test_remove(container, admin, audit_repo):
    svc = container.content_service
    item_id = svc.publish(actor=admin, section=ContentSection.SYLLABUS, form={"title": "Handbook", "file_url": "u"})

    svc.remove(actor=admin, section=ContentSection.SYLLABUS, item_id=item_id)

    assert svc.list_items(ContentSection.SYLLABUS) == []
    assert audit_repo.entries[-1].action == AuditAction.DELETED_CONTENT
    assert audit_repo.entries[-1].details == "Removed content from syllabus: Handbook"
    with pytest.raises(NotFoundError):
        svc.remove(actor=admin, section=ContentSection.SYLLABUS, item_id=item_id)


def test_parse_section():
    assert parse_section("legacy") == ContentSection.LEGACY
    with pytest.raises(ValidationError):
        parse_section("memes")
