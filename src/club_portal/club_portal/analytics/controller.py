from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, error_response, ok
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/analytics", endpoint="admin_analytics")
    @admin_required
    def admin_analytics():
        try:
            overview = container.analytics_service.overview()
        except DomainError as e:
            return error_response(e)
        return ok(overview)
