from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..attendance.clock import SessionClock
from ..attendance.model import NewAttendance
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.constants import AUTO_FILL_COMMENT
from ..core.enums import AttendanceStatus
from ..core.exceptions import DomainError
from ..courses.model import CourseSession
from ..courses.repository import CourseRepository
from ..enrollments.repository import EnrollmentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilledSession:
    session_id: int
    subject_name: str
    teacher_name: str
    student_count: int

    def to_dict(self) -> dict:
        return {
            "sessionId": self.session_id,
            "subjectName": self.subject_name,
            "teacherName": self.teacher_name,
            "studentCount": self.student_count,
        }


@dataclass(frozen=True)
class FailedSession:
    session_id: int
    subject_name: str
    error: str

    def to_dict(self) -> dict:
        return {"sessionId": self.session_id, "subjectName": self.subject_name, "error": self.error}


@dataclass
class ReconciliationResult:
    success: bool
    message: str
    checked: int = 0
    details: List[FilledSession] = field(default_factory=list)
    failures: List[FailedSession] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "details": [d.to_dict() for d in self.details],
            "failures": [f.to_dict() for f in self.failures],
        }


class AutoAttendanceService:
    """Fills in attendance for today's finished classes that nobody recorded.

    Every enrolled student of such a class gets a Present row with a comment
    saying the teacher did not record it. Only creates rows: sessions that
    already have any row for today are left alone, so running it twice is safe.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        courses: CourseRepository,
        enrollments: EnrollmentRepository,
        *,
        clock: Optional[SessionClock] = None,
        comment: str = AUTO_FILL_COMMENT,
        tz_name: Optional[str] = None,
    ):
        self._attendance = attendance
        self._courses = courses
        self._enrollments = enrollments
        self._clock = clock or SessionClock()
        self._comment = comment
        self._tz_name = tz_name

    def _fill(self, course: CourseSession, now: datetime) -> Optional[FilledSession]:
        today = now.date()
        if self._attendance.exists(course.course_id, today):
            logger.debug("Course %s already has attendance for %s", course.course_id, today)
            return None

        roster = self._enrollments.list_for_course(course.course_id)
        if not roster:
            logger.debug("Course %s has no enrolled students", course.course_id)
            return None

        batch = [
            NewAttendance(
                course_id=course.course_id,
                student_id=e.student_id,
                attendance_date=today,
                status=AttendanceStatus.PRESENT,
                comment=self._comment,
            )
            for e in roster
        ]
        written = self._attendance.bulk_create(batch, on_conflict="ignore")
        return FilledSession(
            session_id=course.course_id,
            subject_name=course.display_subject(),
            teacher_name=course.display_teacher(),
            student_count=len(written),
        )

    def run(self, *, now: datetime | None = None) -> ReconciliationResult:
        now = now or now_local(self._tz_name)
        try:
            courses = list(self._courses.list_active())
        except DomainError as e:
            logger.error("Auto attendance could not load courses: %s", e)
            return ReconciliationResult(success=False, message=str(e))

        if not courses:
            return ReconciliationResult(success=True, message="No hay cursos activos para verificar")

        result = ReconciliationResult(success=True, message="", checked=len(courses))
        for course in courses:
            # An unreadable schedule never counts as ended.
            if not self._clock.ended_today(course, now=now):
                continue
            try:
                filled = self._fill(course, now)
            except DomainError as e:
                logger.error("Auto attendance failed for course %s: %s", course.course_id, e)
                result.failures.append(
                    FailedSession(session_id=course.course_id, subject_name=course.display_subject(), error=str(e))
                )
                continue
            if filled:
                logger.info(
                    "Auto attendance filled course %s (%d students)", filled.session_id, filled.student_count
                )
                result.details.append(filled)

        result.message = (
            f"Se verificaron {len(courses)} cursos y se crearon registros automáticos para "
            f"{len(result.details)} cursos finalizados sin registro de asistencia"
        )
        if result.failures:
            result.success = False
            result.message += f"; {len(result.failures)} cursos fallaron"
        return result
