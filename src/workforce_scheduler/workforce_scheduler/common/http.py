"""Shared helpers for the JSON controllers."""
from __future__ import annotations

from functools import wraps

import structlog
from flask import jsonify, request, session

from ..core.enums import MANAGER_ROLES
from ..core.exceptions import (
    AuthorizationError,
    CapacityExceededError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
    WindowViolationError,
)

log = structlog.get_logger(__name__)

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (InvalidStateError, 409),
    (CapacityExceededError, 409),
    (WindowViolationError, 400),
    (ValidationError, 400),
    (AuthorizationError, 403),
)


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def error_response(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def current_identity() -> tuple[str, str]:
    return str(session["user_id"]), str(session["org_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "org_id" not in session:
            return error_response("Authentication required", 401)
        return view(*args, **kwargs)

    return wrapper


def manager_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "org_id" not in session:
            return error_response("Authentication required", 401)
        if session.get("role") not in {r.value for r in MANAGER_ROLES}:
            return error_response("Manager or admin role required", 403)
        return view(*args, **kwargs)

    return wrapper


def handle_domain_errors(view):
    """Translate domain failures into JSON error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return error_response(str(e), status_for(e))
        except Exception:
            log.exception("request_failed", path=request.path, method=request.method)
            return error_response("Internal server error", 500)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
