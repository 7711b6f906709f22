from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from academy_attendance.attendance.model import AttendanceChange, AttendanceRecord, NewAttendance
from academy_attendance.core.enums import CourseStatus, EnrollmentStatus, Weekday
from academy_attendance.core.exceptions import ConflictError, NotFoundError, TransientIOError, ValidationError
from academy_attendance.courses.model import CourseSession, TimeWindow
from academy_attendance.enrollments.model import Enrollment
from academy_attendance.users.model import TeacherProfile, User


class InMemoryAttendance:
    """Attendance store keyed by (course, student, date), recording every write call."""

    def __init__(self):
        self.rows: dict[int, AttendanceRecord] = {}
        self.calls: list[tuple] = []
        self.fail_update_ids: set[int] = set()
        self.fail_bulk_courses: set[int] = set()
        self.fail_next_bulk = 0
        self._id = 0

    def _by_key(self, key) -> Optional[AttendanceRecord]:
        for r in self.rows.values():
            if r.natural_key == key:
                return r
        return None

    def _insert(self, record: NewAttendance) -> AttendanceRecord:
        self._id += 1
        rec = AttendanceRecord(
            attendance_id=self._id,
            course_id=record.course_id,
            student_id=record.student_id,
            attendance_date=record.attendance_date,
            status=record.status,
            comment=record.comment,
            arrival_time=record.arrival_time,
            recorded_by=record.recorded_by,
        )
        self.rows[rec.attendance_id] = rec
        return rec

    def find(self, course_id: int, on_date: date):
        return sorted(
            (r for r in self.rows.values() if r.course_id == course_id and r.attendance_date == on_date),
            key=lambda r: r.student_id,
        )

    def exists(self, course_id: int, on_date: date) -> bool:
        return bool(self.find(course_id, on_date))

    def find_by_student(self, student_id: int):
        return [r for r in self.rows.values() if r.student_id == student_id]

    def find_by_course(self, course_id: int):
        return [r for r in self.rows.values() if r.course_id == course_id]

    def find_by_date(self, on_date: date):
        return [r for r in self.rows.values() if r.attendance_date == on_date]

    def get_by_id(self, attendance_id: int):
        return self.rows.get(attendance_id)

    def create(self, record: NewAttendance) -> AttendanceRecord:
        self.calls.append(("create", record.natural_key))
        if self._by_key(record.natural_key):
            raise ConflictError("El registro ya existe")
        return self._insert(record)

    def bulk_create(self, records, *, on_conflict="ignore"):
        self.calls.append(("bulk_create", len(records), on_conflict))
        if self.fail_next_bulk > 0:
            self.fail_next_bulk -= 1
            raise TransientIOError("Error de conexión con el servidor")
        if records and records[0].course_id in self.fail_bulk_courses:
            raise TransientIOError("Error de conexión con el servidor")

        written = []
        for record in records:
            existing = self._by_key(record.natural_key)
            if existing is None:
                written.append(self._insert(record))
            elif on_conflict == "merge":
                merged = replace(
                    existing,
                    status=record.status,
                    comment=record.comment,
                    arrival_time=record.arrival_time,
                    recorded_by=record.recorded_by,
                )
                self.rows[existing.attendance_id] = merged
                written.append(merged)
        return written

    def update(self, attendance_id: int, change: AttendanceChange) -> AttendanceRecord:
        self.calls.append(("update", attendance_id))
        if attendance_id in self.fail_update_ids:
            raise TransientIOError("Error de conexión con el servidor")
        rec = self.rows.get(attendance_id)
        if rec is None:
            raise NotFoundError(f"No se encontró el registro de asistencia {attendance_id}")
        updated = replace(
            rec,
            status=change.status,
            comment=change.comment,
            arrival_time=change.arrival_time,
            recorded_by=change.recorded_by if change.recorded_by is not None else rec.recorded_by,
        )
        self.rows[attendance_id] = updated
        return updated

    def delete(self, attendance_id: int) -> None:
        self.calls.append(("delete", attendance_id))
        if self.rows.pop(attendance_id, None) is None:
            raise NotFoundError(f"No se encontró el registro de asistencia {attendance_id}")

    def writes(self, kind: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == kind]


class InMemoryCourses:
    def __init__(self, *courses: CourseSession):
        self.courses = {c.course_id: c for c in courses}

    def get_by_id(self, course_id: int):
        return self.courses.get(course_id)

    def list_active(self):
        return [c for c in self.courses.values() if c.is_active]

    def list_for_teacher(self, teacher_id: int):
        return [c for c in self.courses.values() if c.teacher_id == teacher_id]


class InMemoryEnrollments:
    def __init__(self, rosters: Optional[dict[int, list[Enrollment]]] = None):
        self.rosters = rosters or {}

    def list_for_course(self, course_id: int):
        return list(self.rosters.get(course_id, []))


class InMemoryUsers:
    def __init__(self, users: list[User], profiles: Optional[list[TeacherProfile]] = None):
        self.users = {u.username: u for u in users}
        self.profiles = {p.user_id: p for p in profiles or []}

    def get_by_username(self, username: str):
        return self.users.get(username)

    def get_teacher_profile(self, user_id: int):
        return self.profiles.get(user_id)


def make_course(
    course_id: int = 1,
    *,
    teacher_id: int = 10,
    window: Optional[str] = "08:00 - 10:00",
    days=(Weekday.MONDAY, Weekday.WEDNESDAY),
    status: CourseStatus = CourseStatus.ACTIVE,
    subject: Optional[str] = "Matemáticas",
) -> CourseSession:
    time_window = None
    if window:
        try:
            time_window = TimeWindow.parse(window)
        except ValidationError:
            time_window = None
    return CourseSession(
        course_id=course_id,
        subject_id=100 + course_id,
        teacher_id=teacher_id,
        classroom_id=None,
        days_of_week=frozenset(days),
        time_window=time_window,
        status=status,
        schedule_text=window or "",
        subject_name=subject,
        teacher_name="Ana Pérez",
    )


def make_roster(course_id: int, *student_ids: int) -> list[Enrollment]:
    return [
        Enrollment(
            enrollment_id=course_id * 1000 + sid,
            student_id=sid,
            course_id=course_id,
            status=EnrollmentStatus.ENROLLED,
            student_name=f"Alumno {sid}",
        )
        for sid in student_ids
    ]


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2025, 3, 3, 10, 30, 0)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def course_factory():
    return make_course


@pytest.fixture
def roster_factory():
    return make_roster


@pytest.fixture
def courses_of():
    return InMemoryCourses


@pytest.fixture
def enrollments_of():
    return InMemoryEnrollments


@pytest.fixture
def users_of():
    return InMemoryUsers


@pytest.fixture
def api_env(monkeypatch, attendance_repo):
    """Flask app over in-memory stores: admin 'root', teacher 'ana' (teacher 10), teacher 'luis' (teacher 11)."""

    from types import SimpleNamespace

    from werkzeug.security import generate_password_hash

    from academy_attendance.container import build_services
    from academy_attendance.core.enums import Role
    from academy_attendance.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")

    pw = generate_password_hash("pw")
    users = InMemoryUsers(
        [
            User(user_id=1, username="root", password_hash=pw, role=Role.ADMIN),
            User(user_id=2, username="ana", password_hash=pw, role=Role.TEACHER),
            User(user_id=3, username="luis", password_hash=pw, role=Role.TEACHER),
        ],
        [
            TeacherProfile(teacher_id=10, user_id=2, first_names="Ana", last_names="Pérez"),
            TeacherProfile(teacher_id=11, user_id=3, first_names="Luis", last_names="Mora"),
        ],
    )
    courses = InMemoryCourses(make_course(1, teacher_id=10), make_course(2, teacher_id=11, subject="Física"))
    enrollments = InMemoryEnrollments({1: make_roster(1, 1, 2), 2: make_roster(2, 3)})

    container = build_services(
        users_repo=users,
        courses_repo=courses,
        enrollments_repo=enrollments,
        attendance_repo=attendance_repo,
        tz_name="America/Guayaquil",
        cron_token="test-cron-token",
    )
    app = create_app(container)
    client = app.test_client()

    def login(username: str):
        resp = client.post("/login", json={"username": username, "password": "pw"})
        assert resp.status_code == 200
        return resp

    return SimpleNamespace(app=app, client=client, login=login, attendance=attendance_repo, container=container)
