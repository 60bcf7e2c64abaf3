"""Shared Flask plumbing: session guards and JSON error mapping."""

from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import Flask, current_app, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from .core.enums import AuthRejection
from .core.exceptions import AuthenticationError, AuthorizationError, DomainError, StoreError, ValidationError
from .users.identity import AdminIdentity, Identity, TeacherIdentity

EXTENSION_KEY = "teacher_attendance"


def get_container():
    return current_app.extensions[EXTENSION_KEY]


def current_identity() -> Identity:
    return g.identity


def _resolve_identity() -> Identity:
    user_id = session.get("user_id")
    if not user_id:
        raise AuthenticationError("Please log in to continue")
    try:
        identity = get_container().identity_service.resolve(int(user_id))
    except AuthenticationError:
        session.clear()
        raise
    g.identity = identity
    return identity


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        _resolve_identity()
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not isinstance(_resolve_identity(), AdminIdentity):
            raise AuthorizationError("Administrators only", code=AuthRejection.WRONG_ROLE.value)
        return view(*args, **kwargs)

    return wrapper


def teacher_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not isinstance(_resolve_identity(), TeacherIdentity):
            raise AuthorizationError("Teachers only", code=AuthRejection.WRONG_ROLE.value)
        return view(*args, **kwargs)

    return wrapper


def require_self_or_admin(teacher_id: int) -> None:
    identity = current_identity()
    if isinstance(identity, TeacherIdentity) and identity.teacher_id != int(teacher_id):
        raise AuthorizationError("You can only access your own data", code=AuthRejection.WRONG_ROLE.value)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object body")
    return data


def optional_int_arg(name: str) -> Optional[int]:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    if not raw.isdigit():
        raise ValidationError(f"{name} is invalid")
    return int(raw)


def ok(payload: Optional[dict] = None, *, status: int = 200, message: Optional[str] = None):
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if payload:
        body.update(payload)
    return jsonify(body), status


def _error(status: int, message: str, code: Optional[str] = None):
    body: dict[str, Any] = {"success": False, "message": message}
    if code:
        body["code"] = code
    return jsonify(body), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(StoreError)
    def handle_store_error(e: StoreError):
        app.logger.exception("Store error on %s %s", request.method, request.path)
        return _error(500, "Internal server error")

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return _error(e.status_code, e.message, e.code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return _error(e.code or 500, e.description or e.name)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return _error(500, "Internal server error")
