from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..database.connection import RestConnection
from ..database.rest_base import eq, first_or_none, select
from .model import TeacherProfile, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


def row_to_user(r: Dict[str, Any]) -> Optional[User]:
    try:
        role = Role.parse(r.get("role") or "")
    except ValidationError:
        logger.warning("User %s has unknown role %r", r.get("id"), r.get("role"))
        return None
    return User(
        user_id=int(r["id"]),
        username=r["username"],
        password_hash=r.get("password") or "",
        role=role,
        email=r.get("email"),
        is_active=bool(r.get("activo", True)),
    )


class RestUserRepository(UserRepository):
    def __init__(self, conn: RestConnection):
        self._conn = conn

    def get_by_username(self, username: str) -> Optional[User]:
        r = first_or_none(select(self._conn, "usuarios", {"username": eq(username), "select": "*"}))
        return row_to_user(r) if r else None

    def get_teacher_profile(self, user_id: int) -> Optional[TeacherProfile]:
        r = first_or_none(
            select(
                self._conn,
                "profesores",
                {"usuario_id": eq(int(user_id)), "select": "id,usuario_id,nombres,apellidos"},
            )
        )
        if not r:
            return None
        return TeacherProfile(
            teacher_id=int(r["id"]),
            user_id=int(r["usuario_id"]),
            first_names=r.get("nombres") or "",
            last_names=r.get("apellidos") or "",
        )
