from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import EnrollmentStatus


@dataclass(frozen=True)
class Enrollment:
    """Domain entity: a student enrolled in a course (table `inscripciones_cursos`)."""

    enrollment_id: int
    student_id: int
    course_id: int
    status: EnrollmentStatus
    student_name: Optional[str] = None

    def display_name(self) -> str:
        return self.student_name or f"Estudiante {self.student_id}"
