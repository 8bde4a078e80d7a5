"""Helpers shared by the Flask controllers: auth guards and JSON replies."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any

from flask import jsonify, session

from ..audit.model import Actor
from ..core.enums import MemberStatus, Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def ok(payload: Any = None, *, status: int = 200, **extra):
    body = {"success": True}
    if payload is not None:
        body["data"] = payload
    body.update(extra)
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def error_response(exc: Exception):
    """Map a service exception to the JSON error reply."""
    if isinstance(exc, ValidationError):
        return fail(str(exc), 400)
    if isinstance(exc, AuthenticationError):
        return fail(str(exc), 401)
    if isinstance(exc, AuthorizationError):
        return fail(str(exc), 403)
    if isinstance(exc, NotFoundError):
        return fail(str(exc), 404)
    if isinstance(exc, StorageError):
        return fail("The database is unavailable, please retry", 503)
    if isinstance(exc, DomainError):
        return fail(str(exc), 400)
    logger.exception("Unhandled error", exc_info=exc)
    return fail("Internal server error", 500)


def current_actor() -> Actor:
    return Actor(member_id=int(session["member_id"]), name=str(session.get("name") or ""))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "member_id" not in session:
            return fail("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def approved_required(view):
    """Logged-in members whose membership has been approved."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "member_id" not in session:
            return fail("Please log in to continue", 401)
        if session.get("status") != MemberStatus.APPROVED.value:
            return fail("Your membership is awaiting approval", 403)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "member_id" not in session:
            return fail("Please log in to continue", 401)
        if session.get("role") != Role.ADMIN.value:
            return fail("Admins only", 403)
        return view(*args, **kwargs)

    return wrapper
