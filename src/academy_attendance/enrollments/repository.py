from __future__ import annotations

from typing import Protocol, Sequence

from .model import Enrollment


class EnrollmentRepository(Protocol):
    def list_for_course(self, course_id: int) -> Sequence[Enrollment]:
        """Active enrollments of a course, at most one per student."""

        raise NotImplementedError
