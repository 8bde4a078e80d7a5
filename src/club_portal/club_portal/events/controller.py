from __future__ import annotations

import io

from flask import Flask, request, send_file, session

from ..common.datetime_utils import parse_iso_datetime
from ..common.web import admin_required, approved_required, current_actor, error_response, ok
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard", endpoint="dashboard")
    @approved_required
    def dashboard():
        try:
            feed = container.event_service.dashboard_feed(member_id=int(session["member_id"]))
        except DomainError as e:
            return error_response(e)
        return ok({"name": (session.get("name") or "").split(" ")[0], **feed})

    @app.route("/events/<any(events, drives):kind>", endpoint="event_listing")
    @approved_required
    def event_listing(kind: str):
        try:
            listing = container.event_service.listing_for_member(member_id=int(session["member_id"]), kind=kind)
        except DomainError as e:
            return error_response(e)
        return ok(
            {
                "upcoming": [e.to_dict() for e in listing.upcoming],
                "past": [e.to_dict() for e in listing.past],
                "rsvp_event_ids": sorted(listing.rsvp_event_ids),
            }
        )

    @app.route("/events/<int:event_id>/rsvp", methods=["POST"], endpoint="toggle_rsvp")
    @approved_required
    def toggle_rsvp(event_id: int):
        try:
            registered = container.event_service.toggle_rsvp(member_id=int(session["member_id"]), event_id=event_id)
        except DomainError as e:
            return error_response(e)
        return ok({"event_id": event_id, "registered": registered})

    @app.route("/admin/events", methods=["GET"], endpoint="admin_events")
    @admin_required
    def admin_events():
        try:
            events = container.event_service.list_all()
            notices = container.event_service.list_announcements()
        except DomainError as e:
            return error_response(e)
        return ok({"events": [e.to_dict() for e in events], "announcements": [n.to_dict() for n in notices]})

    @app.route("/admin/events", methods=["POST"], endpoint="admin_create_event")
    @admin_required
    def admin_create_event():
        data = request.get_json(silent=True) or request.form
        try:
            raw_date = data.get("date", "")
            event_id = container.event_service.create_event(
                actor=current_actor(),
                title=data.get("title", ""),
                event_type=data.get("type", ""),
                date=parse_iso_datetime(raw_date) if raw_date else None,
                location=data.get("location", ""),
                description=data.get("description", ""),
            )
        except DomainError as e:
            return error_response(e)
        return ok({"event_id": event_id}, status=201)

    @app.route("/admin/events/<int:event_id>", methods=["GET"], endpoint="admin_event_detail")
    @admin_required
    def admin_event_detail(event_id: int):
        try:
            event = container.event_service.get_event(event_id)
            registrants = container.event_service.list_registrants(event_id)
        except DomainError as e:
            return error_response(e)
        return ok(
            {
                "event": event.to_dict(),
                "registrants": [
                    {
                        "member_id": r.member_id,
                        "name": r.name,
                        "qid": r.qid,
                        "course": r.course,
                        "branch": r.branch,
                        "phone": r.phone,
                        "housing": r.hosteler_status,
                        "registered_at": r.registered_at.isoformat(),
                    }
                    for r in registrants
                ],
            }
        )

    @app.route("/admin/events/<int:event_id>", methods=["DELETE"], endpoint="admin_delete_event")
    @admin_required
    def admin_delete_event(event_id: int):
        try:
            container.event_service.delete_event(actor=current_actor(), event_id=event_id)
        except DomainError as e:
            return error_response(e)
        return ok()

    @app.route("/admin/events/<int:event_id>/registrants.csv", endpoint="admin_export_registrants")
    @admin_required
    def admin_export_registrants(event_id: int):
        try:
            export = container.event_service.export_registrants(event_id)
        except DomainError as e:
            return error_response(e)

        return send_file(
            io.BytesIO(export.content.encode("utf-8-sig")),
            mimetype="text/csv",
            as_attachment=True,
            download_name=export.filename,
        )

    @app.route("/admin/announcements", methods=["POST"], endpoint="admin_post_announcement")
    @admin_required
    def admin_post_announcement():
        data = request.get_json(silent=True) or request.form
        try:
            announcement_id = container.event_service.post_announcement(
                actor=current_actor(),
                title=data.get("title", ""),
                content=data.get("content", ""),
                urgency=data.get("urgency", ""),
            )
        except DomainError as e:
            return error_response(e)
        return ok({"announcement_id": announcement_id}, status=201)

    @app.route("/admin/announcements/<int:announcement_id>", methods=["DELETE"], endpoint="admin_delete_announcement")
    @admin_required
    def admin_delete_announcement(announcement_id: int):
        try:
            container.event_service.delete_announcement(actor=current_actor(), announcement_id=announcement_id)
        except DomainError as e:
            return error_response(e)
        return ok()
