from __future__ import annotations

from datetime import timedelta

from flask import Flask, request, session

from ..common.web import admin_required, approved_required, current_actor, error_response, fail, login_required, ok
from ..core.constants import DEFAULT_SESSION_DAYS, RECONCILIATION_SESSION_KEY
from ..core.enums import MemberStatus
from ..core.exceptions import DomainError
from ..container import Container
from .service import OnboardingForm


def register(app: Flask, container: Container) -> None:
    def _end_session() -> None:
        container.reconciliation_service.cancel(session.get(RECONCILIATION_SESSION_KEY))
        session.clear()

    @app.before_request
    def refresh_session_member():
        # Role and status change under a logged-in member; reload them each request.
        if "member_id" not in session:
            return None
        try:
            member = container.members_repo.get_by_id(int(session["member_id"]))
        except DomainError as e:
            return error_response(e)
        if member is None or member.status == MemberStatus.BANNED:
            _end_session()
            return None
        session["name"] = member.name
        session["role"] = member.role.value
        session["status"] = member.status.value
        return None

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        try:
            s_member = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except DomainError as e:
            return error_response(e)

        _end_session()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        session["member_id"] = s_member.member_id
        session["name"] = s_member.name
        session["role"] = s_member.role.value
        session["status"] = s_member.status.value
        return ok({"member_id": s_member.member_id, "role": s_member.role.value, "status": s_member.status.value})

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        _end_session()
        return ok()

    @app.route("/onboarding", methods=["POST"], endpoint="onboarding")
    def onboarding():
        data = request.get_json(silent=True) or request.form
        form = OnboardingForm(
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            qid=data.get("qid", ""),
            phone=data.get("phone", ""),
            gender=data.get("gender", ""),
            course=data.get("course", ""),
            branch=data.get("branch", ""),
            section=data.get("section", ""),
            hosteler_status=data.get("hosteler_status", ""),
            profile_photo=data.get("profile_photo", ""),
        )
        try:
            member_id = container.membership_service.onboard(form)
        except DomainError as e:
            return error_response(e)
        return ok({"member_id": member_id, "status": MemberStatus.PENDING.value}, status=201)

    @app.route("/pending", endpoint="pending")
    @login_required
    def pending():
        try:
            member = container.membership_service.get_member(int(session["member_id"]))
        except DomainError as e:
            return error_response(e)
        return ok({"status": member.status.value})

    @app.route("/me/profile", endpoint="my_profile")
    @approved_required
    def my_profile():
        member_id = int(session["member_id"])
        try:
            member = container.membership_service.get_member(member_id)
            summary = container.attendance_service.member_summary(member_id)
        except DomainError as e:
            return error_response(e)
        return ok({"profile": member.to_dict(), "stats": summary["overall"]})

    @app.route("/me/profile/update-request", methods=["POST"], endpoint="request_profile_update")
    @approved_required
    def request_profile_update():
        data = request.get_json(silent=True) or request.form
        try:
            request_id = container.membership_service.request_profile_update(
                member_id=int(session["member_id"]),
                proposed=dict(data),
            )
        except DomainError as e:
            return error_response(e)
        return ok({"request_id": request_id}, status=201)

    @app.route("/admin/members", endpoint="admin_members")
    @admin_required
    def admin_members():
        try:
            status = MemberStatus(request.args.get("status", MemberStatus.PENDING.value))
        except ValueError:
            return fail("Unknown status tab", 400)
        try:
            members = container.membership_service.list_for_review(status, search=request.args.get("q", ""))
        except DomainError as e:
            return error_response(e)
        return ok([m.to_dict() for m in members])

    @app.route("/admin/members/<int:member_id>/status", methods=["POST"], endpoint="admin_member_status")
    @admin_required
    def admin_member_status(member_id: int):
        data = request.get_json(silent=True) or request.form
        try:
            new_status = MemberStatus(data.get("status", ""))
        except ValueError:
            return fail("Unknown status", 400)
        try:
            container.membership_service.change_status(actor=current_actor(), member_id=member_id, new_status=new_status)
        except DomainError as e:
            return error_response(e)
        return ok({"member_id": member_id, "status": new_status.value})

    @app.route("/admin/update-requests", endpoint="admin_update_requests")
    @admin_required
    def admin_update_requests():
        try:
            reqs = container.membership_service.pending_update_requests()
        except DomainError as e:
            return error_response(e)
        return ok(
            [
                {"request_id": r.request_id, "member_id": r.member_id, **r.proposed(), "status": r.status.value}
                for r in reqs
            ]
        )

    @app.route(
        "/admin/update-requests/<int:request_id>/<any(approve, reject):decision>",
        methods=["POST"],
        endpoint="admin_decide_update_request",
    )
    @admin_required
    def admin_decide_update_request(request_id: int, decision: str):
        try:
            changes = container.membership_service.decide_update_request(
                actor=current_actor(),
                request_id=request_id,
                approve=decision == "approve",
            )
        except DomainError as e:
            return error_response(e)
        return ok({"request_id": request_id, "applied": changes})
