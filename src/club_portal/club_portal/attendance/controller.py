from __future__ import annotations

from flask import Flask, request, session

from ..common.web import admin_required, approved_required, current_actor, error_response, fail, ok
from ..core.constants import RECONCILIATION_SESSION_KEY as SESSION_KEY
from ..core.exceptions import DomainError
from ..container import Container
from .ingestion import decode_upload


def _uploaded_bytes() -> bytes:
    upload = request.files.get("file")
    if upload is not None:
        return upload.read()
    return request.get_data() or b""


def register(app: Flask, container: Container) -> None:
    reconciliation = container.reconciliation_service

    @app.route("/admin/attendance/<int:event_id>/upload", methods=["POST"], endpoint="attendance_upload")
    @admin_required
    def attendance_upload(event_id: int):
        raw = _uploaded_bytes()
        if not raw:
            return fail("Please choose a CSV file to upload", 400)

        # A new sheet replaces whatever this operator had open.
        reconciliation.cancel(session.get(SESSION_KEY))
        session.pop(SESSION_KEY, None)
        try:
            rec_session = reconciliation.start(
                event_id=event_id,
                csv_text=decode_upload(raw),
                actor=current_actor(),
            )
        except DomainError as e:
            return error_response(e)

        session[SESSION_KEY] = rec_session.token
        return ok(rec_session.to_dict(), status=201)

    @app.route("/admin/attendance/session", endpoint="attendance_session")
    @admin_required
    def attendance_session():
        try:
            rec_session = reconciliation.get(session.get(SESSION_KEY))
        except DomainError as e:
            return error_response(e)
        return ok(rec_session.to_dict())

    @app.route(
        "/admin/attendance/session/toggle/<int:member_id>",
        methods=["POST"],
        endpoint="attendance_session_toggle",
    )
    @admin_required
    def attendance_session_toggle(member_id: int):
        try:
            rec_session = reconciliation.get(session.get(SESSION_KEY))
            present = rec_session.toggle(member_id)
        except DomainError as e:
            return error_response(e)
        return ok({"member_id": member_id, "present": present, "present_count": len(rec_session.selection)})

    @app.route("/admin/attendance/session/commit", methods=["POST"], endpoint="attendance_session_commit")
    @admin_required
    def attendance_session_commit():
        token = session.get(SESSION_KEY)
        try:
            rec_session = reconciliation.get(token)
            count = reconciliation.commit(rec_session)
        except DomainError as e:
            # On failure the session stays open in review so the operator can retry.
            return error_response(e)

        reconciliation.cancel(token)
        session.pop(SESSION_KEY, None)
        return ok({"event_id": rec_session.event.event_id, "marked_present": count, "state": rec_session.state.value})

    @app.route("/admin/attendance/session/cancel", methods=["POST"], endpoint="attendance_session_cancel")
    @admin_required
    def attendance_session_cancel():
        reconciliation.cancel(session.pop(SESSION_KEY, None))
        return ok()

    @app.route("/me/attendance", endpoint="my_attendance")
    @approved_required
    def my_attendance():
        try:
            summary = container.attendance_service.member_summary(int(session["member_id"]))
        except DomainError as e:
            return error_response(e)
        return ok(summary)

    @app.route(
        "/admin/members/<int:member_id>/attendance/<int:event_id>",
        methods=["POST"],
        endpoint="admin_set_attendance",
    )
    @admin_required
    def admin_set_attendance(member_id: int, event_id: int):
        data = request.get_json(silent=True) or request.form
        present = str(data.get("status", "")).strip().lower() == "present"
        try:
            container.attendance_service.set_member_attendance(
                actor=current_actor(),
                event_id=event_id,
                member_id=member_id,
                present=present,
            )
        except DomainError as e:
            return error_response(e)
        return ok({"member_id": member_id, "event_id": event_id, "present": present})
