from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CourseSession


class CourseRepository(Protocol):
    """Read-only course directory.

    Note: Attendance logic references courses but never mutates them.
    """

    def get_by_id(self, course_id: int) -> Optional[CourseSession]:
        raise NotImplementedError

    def list_active(self) -> Sequence[CourseSession]:
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int) -> Sequence[CourseSession]:
        raise NotImplementedError
