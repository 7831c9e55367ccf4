from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Dict, Mapping

from bson import ObjectId
from bson.errors import InvalidId
from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


@dataclass(frozen=True)
class Actor:
    """The signed-in user as placed into the Flask session by the auth provider."""

    user_id: ObjectId
    role: Role


def current_actor() -> Actor:
    try:
        return Actor(user_id=ObjectId(session["user_id"]), role=Role(session["role"]))
    except (KeyError, InvalidId, TypeError, ValueError):
        raise AuthenticationError("Unauthorized")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_actor()
        return view(*args, **kwargs)

    return wrapper


def json_body() -> Mapping[str, Any]:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def ok(status: int = 200, **payload: Any):
    body: Dict[str, Any] = {"success": True}
    body.update(payload)
    return jsonify(body), status


def status_for(err: DomainError) -> int:
    for cls, status in STATUS_BY_ERROR:
        if isinstance(err, cls):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"success": False, "message": str(e)}), status_for(e)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # Let Flask render its own HTTP errors (404 route, 405 method, ...)
        code = getattr(e, "code", None)
        if isinstance(code, int) and code < 500:
            return jsonify({"success": False, "message": getattr(e, "description", str(e))}), code

        logger.exception("unhandled error on %s %s", request.method, request.path)
        message = str(e) if app.config.get("DEBUG") else "Internal server error"
        return jsonify({"success": False, "message": message}), 500
