from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    username: str
    full_name: str
    role: Role
    teacher_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "name": self.full_name,
            "role": self.role.value,
            "teacher_id": self.teacher_id,
        }


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        username = require_non_empty(username, "Usuario")
        user = self._users.get_by_username(username)
        if not user or not user.is_active:
            raise AuthenticationError("Usuario o contraseña incorrectos")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # Placeholder or corrupted hashes in seed rows.
            ok = False
        if not ok:
            raise AuthenticationError("Usuario o contraseña incorrectos")

        full_name = user.username
        teacher_id: Optional[int] = None
        if user.role == Role.TEACHER:
            profile = self._users.get_teacher_profile(user.user_id)
            if profile is None:
                logger.warning("Teacher account %s has no teacher profile", user.user_id)
            else:
                teacher_id = profile.teacher_id
                full_name = profile.full_name

        return SessionUser(
            user_id=user.user_id,
            username=user.username,
            full_name=full_name,
            role=user.role,
            teacher_id=teacher_id,
        )
