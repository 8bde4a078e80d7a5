from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, approved_required, current_actor, error_response, ok
from ..core.enums import ContentSection
from ..core.exceptions import DomainError
from ..container import Container
from .service import parse_section


def register(app: Flask, container: Container) -> None:
    content = container.content_service

    # Public site pages.
    @app.route("/content/<any(gallery, legacy, team):section>", endpoint="public_content")
    def public_content(section: str):
        try:
            items = content.list_items(parse_section(section), category=request.args.get("category"))
        except DomainError as e:
            return error_response(e)
        return ok([item.to_dict() for item in items])

    @app.route("/resources", endpoint="resources")
    @approved_required
    def resources():
        try:
            notices = container.event_service.list_announcements()
            syllabus = content.list_items(ContentSection.SYLLABUS)
        except DomainError as e:
            return error_response(e)
        return ok(
            {
                "announcements": [n.to_dict() for n in notices],
                "syllabus": [item.to_dict() for item in syllabus],
            }
        )

    @app.route("/admin/content/<section>", methods=["POST"], endpoint="admin_publish_content")
    @admin_required
    def admin_publish_content(section: str):
        data = request.get_json(silent=True) or request.form
        try:
            item_id = content.publish(actor=current_actor(), section=parse_section(section), form=dict(data))
        except DomainError as e:
            return error_response(e)
        return ok({"item_id": item_id, "section": section}, status=201)

    @app.route("/admin/content/<section>/<int:item_id>", methods=["DELETE"], endpoint="admin_remove_content")
    @admin_required
    def admin_remove_content(section: str, item_id: int):
        try:
            content.remove(actor=current_actor(), section=parse_section(section), item_id=item_id)
        except DomainError as e:
            return error_response(e)
        return ok()
