from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, error_response, ok
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/directory", endpoint="admin_directory")
    @admin_required
    def admin_directory():
        low_only = request.args.get("low_attendance", "").lower() in ("1", "true", "yes")
        try:
            entries = container.directory_service.list_members(
                search=request.args.get("q", ""),
                low_attendance=low_only,
            )
        except DomainError as e:
            return error_response(e)
        return ok([entry.to_dict() for entry in entries], count=len(entries))

    @app.route("/admin/directory/<int:member_id>", endpoint="admin_member_detail")
    @admin_required
    def admin_member_detail(member_id: int):
        try:
            detail = container.directory_service.member_detail(member_id)
        except DomainError as e:
            return error_response(e)
        return ok(detail)
