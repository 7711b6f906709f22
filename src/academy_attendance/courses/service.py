from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import Weekday
from ..core.exceptions import AuthorizationError, NotFoundError
from .model import CourseSession
from .repository import CourseRepository


class CourseService:
    def __init__(self, courses: CourseRepository):
        self._courses = courses

    def get(self, course_id: int) -> CourseSession:
        course = self._courses.get_by_id(int(course_id))
        if not course:
            raise NotFoundError(f"No se encontró el curso con ID {course_id}")
        return course

    def get_owned(self, course_id: int, teacher_id: int | None) -> CourseSession:
        """Course by id, checked against the teacher scope (None means any course)."""

        course = self.get(course_id)
        if teacher_id is not None and course.teacher_id != int(teacher_id):
            raise AuthorizationError("El curso no pertenece a este profesor")
        return course

    def list_active(self, *, on_date: date | None = None) -> Sequence[CourseSession]:
        return self._on_date(self._courses.list_active(), on_date)

    def list_for_teacher(self, teacher_id: int, *, on_date: date | None = None) -> Sequence[CourseSession]:
        return self._on_date(self._courses.list_for_teacher(int(teacher_id)), on_date)

    @staticmethod
    def _on_date(courses: Sequence[CourseSession], on_date: date | None) -> list[CourseSession]:
        if on_date is None:
            return list(courses)
        day = Weekday(on_date.weekday())
        return [c for c in courses if day in c.days_of_week]

    def to_dict(self, course: CourseSession) -> dict:
        return {
            "id": course.course_id,
            "subject": course.display_subject(),
            "teacher": course.display_teacher(),
            "classroom": course.classroom_name or (f"Aula {course.classroom_id}" if course.classroom_id else None),
            "schedule": course.time_window.format() if course.time_window else course.schedule_text,
            "days": [d.label for d in sorted(course.days_of_week)],
            "status": course.status.value,
            "capacity": course.capacity,
        }
