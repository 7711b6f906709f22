from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a login account (table `usuarios`).

    Note: Plain data object, no store access here.
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    email: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class TeacherProfile:
    """Teacher row linked to a user account (table `profesores`)."""

    teacher_id: int
    user_id: int
    first_names: str = ""
    last_names: str = ""

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_names, self.last_names) if p) or f"Profesor {self.teacher_id}"
