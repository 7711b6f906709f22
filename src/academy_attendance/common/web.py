from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import current_app, jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    PartialBatchFailure,
    TransientIOError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (TransientIOError, 503),
)


def envelope(data: Any = None, *, message: str = "", success: bool = True, status: int = 200):
    return jsonify({"success": success, "message": message, "data": data}), status


def error_response(exc: Exception):
    """Map a raised error to the JSON envelope and an HTTP status."""

    if isinstance(exc, PartialBatchFailure):
        logger.error("Partial write: %s", exc)
        return envelope(
            {"outcomes": [o.to_dict() for o in exc.outcomes]}, message=str(exc), success=False, status=500
        )

    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            if status >= 500:
                logger.error("%s: %s", type(exc).__name__, exc)
            else:
                logger.info("%s: %s", type(exc).__name__, exc)
            return envelope(message=str(exc), success=False, status=status)

    logger.exception("Unexpected error")
    if isinstance(exc, DomainError) or bool(current_app.config.get("DEBUG", False)):
        return envelope(message=f"Error del sistema: {exc}", success=False, status=500)
    return envelope(message="Error del sistema", success=False, status=500)


def api_view(view):
    """Run a JSON view and turn raised errors into the error envelope."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except Exception as e:
            return error_response(e)

    return wrapper


def current_role() -> Optional[Role]:
    role = session.get("role")
    return Role(role) if role else None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return envelope(message="Debe iniciar sesión para continuar", success=False, status=401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return envelope(message="Debe iniciar sesión para continuar", success=False, status=401)
        if session.get("role") != Role.ADMIN.value:
            return envelope(message="No tiene permisos para esta acción", success=False, status=403)
        return view(*args, **kwargs)

    return wrapper


def teacher_required(view):
    """Allow teachers and admins.

    Teachers are scoped to their own courses through ``session['teacher_id']``;
    admins see every course.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return envelope(message="Debe iniciar sesión para continuar", success=False, status=401)
        role = session.get("role")
        if role == Role.ADMIN.value:
            return view(*args, **kwargs)
        if role != Role.TEACHER.value or session.get("teacher_id") is None:
            return envelope(message="No tiene permisos para esta acción", success=False, status=403)
        return view(*args, **kwargs)

    return wrapper


def session_teacher_id() -> Optional[int]:
    """Teacher scope of the logged-in user, None for admins."""

    if session.get("role") == Role.ADMIN.value:
        return None
    tid = session.get("teacher_id")
    return int(tid) if tid is not None else None
