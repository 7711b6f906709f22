from __future__ import annotations

from datetime import datetime

import pytest

from academy_attendance.attendance.model import NewAttendance
from academy_attendance.auto_attendance.service import AutoAttendanceService
from academy_attendance.core.constants import AUTO_FILL_COMMENT
from academy_attendance.core.enums import AttendanceStatus, CourseStatus, Weekday
from academy_attendance.core.exceptions import TransientIOError

AFTER_CLASS = datetime(2025, 3, 3, 10, 30)  # Monday


@pytest.fixture
def reconciler(attendance_repo, courses_of, enrollments_of):
    def build(courses, rosters):
        return AutoAttendanceService(attendance_repo, courses_of(*courses), enrollments_of(rosters))

    return build


def test_fills_ended_session_with_present_rows(reconciler, attendance_repo, course_factory, roster_factory):
    svc = reconciler([course_factory(1)], {1: roster_factory(1, 11, 12, 13)})

    result = svc.run(now=AFTER_CLASS)

    rows = attendance_repo.find(1, AFTER_CLASS.date())
    assert len(rows) == 3
    assert {r.status for r in rows} == {AttendanceStatus.PRESENT}
    assert {r.comment for r in rows} == {AUTO_FILL_COMMENT}
    assert result.success is True
    assert result.to_dict()["details"] == [
        {"sessionId": 1, "subjectName": "Matemáticas", "teacherName": "Ana Pérez", "studentCount": 3}
    ]
    assert attendance_repo.writes("bulk_create") == [("bulk_create", 3, "ignore")]


def test_second_run_creates_nothing(reconciler, attendance_repo, course_factory, roster_factory):
    svc = reconciler([course_factory(1)], {1: roster_factory(1, 11, 12, 13)})

    svc.run(now=AFTER_CLASS)
    second = svc.run(now=AFTER_CLASS.replace(hour=11))

    assert len(attendance_repo.find(1, AFTER_CLASS.date())) == 3
    assert second.details == []
    assert len(attendance_repo.writes("bulk_create")) == 1


def test_session_with_any_row_is_left_alone(reconciler, attendance_repo, course_factory, roster_factory):
    attendance_repo.bulk_create(
        [NewAttendance(course_id=1, student_id=11, attendance_date=AFTER_CLASS.date(), status=AttendanceStatus.ABSENT)]
    )
    svc = reconciler([course_factory(1)], {1: roster_factory(1, 11, 12)})

    result = svc.run(now=AFTER_CLASS)

    assert result.details == []
    assert [r.student_id for r in attendance_repo.find(1, AFTER_CLASS.date())] == [11]


def test_skips_sessions_not_due(reconciler, attendance_repo, course_factory, roster_factory):
    courses = [
        course_factory(1, window="10:00 - 12:00"),  # still running
        course_factory(2, days=(Weekday.TUESDAY,)),  # not today
        course_factory(3, window="08:00"),  # unreadable
        course_factory(4, status=CourseStatus.CANCELLED),
        course_factory(5),  # nobody enrolled
    ]
    rosters = {cid: roster_factory(cid, 11) for cid in (1, 2, 3, 4)}
    svc = reconciler(courses, rosters)

    result = svc.run(now=AFTER_CLASS)

    assert result.success is True
    assert result.details == []
    assert attendance_repo.rows == {}
    assert "4 cursos" in result.message


def test_failing_session_does_not_stop_the_others(reconciler, attendance_repo, course_factory, roster_factory):
    attendance_repo.fail_bulk_courses.add(1)
    svc = reconciler(
        [course_factory(1), course_factory(2, subject="Física")],
        {1: roster_factory(1, 11), 2: roster_factory(2, 21, 22)},
    )

    result = svc.run(now=AFTER_CLASS)

    assert result.success is False
    assert [d.session_id for d in result.details] == [2]
    assert [f.session_id for f in result.failures] == [1]
    assert len(attendance_repo.find(2, AFTER_CLASS.date())) == 2

    attendance_repo.fail_bulk_courses.clear()
    retry = svc.run(now=AFTER_CLASS)
    assert retry.success is True
    assert [d.session_id for d in retry.details] == [1]


def test_no_active_courses(reconciler):
    result = reconciler([], {}).run(now=AFTER_CLASS)

    assert result.success is True
    assert result.message == "No hay cursos activos para verificar"


def test_course_load_failure_is_reported(attendance_repo, enrollments_of):
    class BrokenCourses:
        def list_active(self):
            raise TransientIOError("Error de conexión con el servidor")

    result = AutoAttendanceService(attendance_repo, BrokenCourses(), enrollments_of()).run(now=AFTER_CLASS)

    assert result.success is False
    assert result.to_dict() == {
        "success": False,
        "message": "Error de conexión con el servidor",
        "details": [],
        "failures": [],
    }


def test_student_count_reports_rows_actually_written(attendance_repo, courses_of, enrollments_of, course_factory, roster_factory):
    class RacingTeacher(type(attendance_repo)):
        """The teacher saves student 12 between the existence check and the batch insert."""

        def exists(self, course_id, on_date):
            found = super().exists(course_id, on_date)
            self.create(
                NewAttendance(course_id=course_id, student_id=12, attendance_date=on_date, status=AttendanceStatus.LATE)
            )
            return found

    store = RacingTeacher()
    svc = AutoAttendanceService(store, courses_of(course_factory(1)), enrollments_of({1: roster_factory(1, 11, 12, 13)}))

    result = svc.run(now=AFTER_CLASS)

    assert result.details[0].student_count == 2
    rows = {r.student_id: r.status for r in store.find(1, AFTER_CLASS.date())}
    assert rows == {11: AttendanceStatus.PRESENT, 12: AttendanceStatus.LATE, 13: AttendanceStatus.PRESENT}
