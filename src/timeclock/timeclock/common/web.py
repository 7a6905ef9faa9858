from __future__ import annotations

from functools import wraps

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ChallengeLocked,
    ChallengeMismatch,
    DailyLimitReached,
    DomainError,
    EvidenceUploadError,
    GeofenceViolation,
    LocationUnavailable,
    PersistenceConflict,
)

_STATUS = (
    (ChallengeLocked, 423),
    (DailyLimitReached, 409),
    (PersistenceConflict, 409),
    (GeofenceViolation, 403),
    (AuthorizationError, 403),
    (LocationUnavailable, 503),
    (EvidenceUploadError, 503),
)


def status_for(exc: DomainError) -> int:
    for exc_type, status in _STATUS:
        if isinstance(exc, exc_type):
            return status
    return 400


def error_response(exc: DomainError):
    body = {"success": False, "error": exc.code, "message": str(exc)}
    if isinstance(exc, GeofenceViolation):
        body["distance_km"] = round(exc.distance_km, 3)
        body["radius_km"] = exc.radius_km
    elif isinstance(exc, ChallengeMismatch):
        body["attempts_left"] = exc.attempts_left
    elif isinstance(exc, ChallengeLocked):
        body["seconds_left"] = exc.seconds_left
    elif isinstance(exc, LocationUnavailable):
        body["reason"] = exc.reason.value
    return jsonify(body), status_for(exc)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "error": "unauthenticated", "message": "Faça login para continuar."}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "error": "unauthenticated", "message": "Faça login para continuar."}), 401
        if not session.get("is_admin"):
            return error_response(AuthorizationError("Acesso restrito a administradores."))
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> str:
    return str(session["user_id"])


def current_role() -> Role:
    return Role.from_code(session.get("role"))


def request_payload():
    """Fields of a form post (with or without files), else the JSON body."""
    if request.form or request.files:
        return request.form
    return request.get_json(silent=True) or {}
