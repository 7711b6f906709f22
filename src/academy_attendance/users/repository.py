from __future__ import annotations

from typing import Optional, Protocol

from .model import TeacherProfile, User


class UserRepository(Protocol):
    """Repository interface for accounts.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def get_teacher_profile(self, user_id: int) -> Optional[TeacherProfile]:
        raise NotImplementedError
