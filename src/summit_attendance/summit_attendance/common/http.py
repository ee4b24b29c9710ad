from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    PreconditionFailed,
    TransientStoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (PreconditionFailed, 409),
    (TransientStoreError, 503),
)


def ok(status: int = 200, **payload):
    payload["success"] = True
    return jsonify(payload), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def error_response(e: DomainError):
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(e, cls):
            return fail(str(e), status)
    return fail(str(e), 400)


def unexpected_error(action: str):
    """Log the active exception and answer with a generic 500."""
    logger.exception("Unexpected error while %s", action)
    return fail(f"System error while {action}. Please try again.", 500)


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "admin_id" not in session:
            return fail("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "admin_id" not in session:
            return fail("Please sign in to continue", 401)
        if session.get("role") != Role.ADMIN.value:
            return fail("You do not have permission to do this", 403)
        return view(*args, **kwargs)

    return wrapper
