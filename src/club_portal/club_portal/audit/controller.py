from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, error_response, ok
from ..core.constants import AUDIT_LOG_LIMIT
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/logs", endpoint="admin_logs")
    @admin_required
    def admin_logs():
        limit = request.args.get("limit", default=AUDIT_LOG_LIMIT, type=int)
        limit = max(1, min(limit, AUDIT_LOG_LIMIT))
        try:
            entries = container.audit_service.recent(limit)
        except DomainError as e:
            return error_response(e)
        return ok([entry.to_dict() for entry in entries])
