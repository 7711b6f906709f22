from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Mapping, Optional, Union

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..courses.model import CourseSession
from ..courses.repository import CourseRepository
from ..enrollments.repository import EnrollmentRepository
from .factory import RecordingStrategyFactory
from .model import AttendanceRecord
from .registration import AttendanceRegistration, SubmissionResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases around the manual registration workflow."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        courses: CourseRepository,
        enrollments: EnrollmentRepository,
        *,
        strategy_factory: RecordingStrategyFactory | None = None,
        tz_name: str | None = None,
    ):
        self._attendance = attendance
        self._courses = courses
        self._enrollments = enrollments
        self._factory = strategy_factory or RecordingStrategyFactory()
        self._tz_name = tz_name

    def _get_course(self, course_id: int, teacher_id: Optional[int]) -> CourseSession:
        course = self._courses.get_by_id(int(course_id))
        if not course:
            raise NotFoundError(f"No se encontró el curso con ID {course_id}")
        if teacher_id is not None and course.teacher_id != int(teacher_id):
            raise AuthorizationError("El curso no pertenece a este profesor")
        return course

    def load_existing(
        self,
        course_id: int,
        on_date: date,
        *,
        teacher_id: Optional[int] = None,
        recorded_by: Optional[int] = None,
        now: datetime | None = None,
    ) -> AttendanceRegistration:
        """Open the registration for a course and date, pre-filled when rows exist."""

        now = now or now_local(self._tz_name)
        course = self._get_course(course_id, teacher_id)
        roster = self._enrollments.list_for_course(course.course_id)
        existing = self._attendance.find(course.course_id, on_date)

        strategy = self._factory.for_session(course=course, on_date=on_date, now=now)
        decision = strategy.decide(editing=bool(existing))

        return AttendanceRegistration(
            course=course,
            attendance_date=on_date,
            roster=roster,
            existing=existing,
            decision=decision,
            attendance=self._attendance,
            recorded_by=recorded_by,
        )

    def submit(
        self,
        course_id: int,
        on_date: date,
        statuses: Mapping[int, Union[AttendanceStatus, str]],
        *,
        teacher_id: Optional[int] = None,
        recorded_by: Optional[int] = None,
        now: datetime | None = None,
    ) -> SubmissionResult:
        now = now or now_local(self._tz_name)
        registration = self.load_existing(
            course_id, on_date, teacher_id=teacher_id, recorded_by=recorded_by, now=now
        )
        for student_id, status in statuses.items():
            registration.set_status(int(student_id), status)

        registration.submit(now=now)
        result = registration.confirm()

        if result.late_modification:
            logger.info(
                "Late attendance modification for course %s on %s by %s",
                course_id,
                on_date.isoformat(),
                recorded_by,
            )
        return result

    def list_for_date(self, on_date: date) -> list[AttendanceRecord]:
        return list(self._attendance.find_by_date(on_date))

    def delete_record(self, *, current_role: Role, attendance_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos para eliminar registros")

        self._attendance.delete(int(attendance_id))
        logger.info("Attendance record %s deleted", attendance_id)

    @staticmethod
    def to_dict(record: AttendanceRecord) -> dict:
        return {
            "id": record.attendance_id,
            "course_id": record.course_id,
            "student_id": record.student_id,
            "date": record.attendance_date.strftime("%Y-%m-%d"),
            "status": record.status.value,
            "comment": record.comment or "",
            "arrival_time": record.arrival_time.strftime("%H:%M") if record.arrival_time else None,
            "recorded_by": record.recorded_by,
        }
