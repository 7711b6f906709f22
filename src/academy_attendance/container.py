from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import RecordingStrategyFactory
from .attendance.repository import AttendanceRepository
from .attendance.rest_attendance_repository import RestAttendanceRepository
from .attendance.service import AttendanceService
from .auto_attendance.service import AutoAttendanceService
from .core.constants import AUTO_FILL_COMMENT, DEFAULT_REQUEST_TIMEOUT
from .courses.repository import CourseRepository
from .courses.rest_course_repository import RestCourseRepository
from .courses.service import CourseService
from .database.connection import RestConfig, RestConnection
from .enrollments.repository import EnrollmentRepository
from .enrollments.rest_enrollment_repository import RestEnrollmentRepository
from .reports.service import AttendanceReportService
from .users.repository import UserRepository
from .users.rest_user_repository import RestUserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[RestConnection]

    users_repo: UserRepository
    courses_repo: CourseRepository
    enrollments_repo: EnrollmentRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    course_service: CourseService
    attendance_service: AttendanceService
    auto_attendance_service: AutoAttendanceService
    report_service: AttendanceReportService

    tz_name: Optional[str] = None
    cron_token: Optional[str] = None


def build_services(
    *,
    users_repo: UserRepository,
    courses_repo: CourseRepository,
    enrollments_repo: EnrollmentRepository,
    attendance_repo: AttendanceRepository,
    conn: Optional[RestConnection] = None,
    tz_name: Optional[str] = None,
    cron_token: Optional[str] = None,
    auto_fill_comment: str = AUTO_FILL_COMMENT,
) -> Container:
    """Wire services around already-built repositories."""

    return Container(
        conn=conn,
        users_repo=users_repo,
        courses_repo=courses_repo,
        enrollments_repo=enrollments_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        course_service=CourseService(courses_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            courses_repo,
            enrollments_repo,
            strategy_factory=RecordingStrategyFactory(),
            tz_name=tz_name,
        ),
        auto_attendance_service=AutoAttendanceService(
            attendance_repo,
            courses_repo,
            enrollments_repo,
            comment=auto_fill_comment,
            tz_name=tz_name,
        ),
        report_service=AttendanceReportService(attendance_repo, enrollments_repo, courses_repo),
        tz_name=tz_name,
        cron_token=cron_token,
    )


def build_container(
    *,
    rest_config: dict,
    tz_name: Optional[str] = None,
    cron_token: Optional[str] = None,
    auto_fill_comment: str = AUTO_FILL_COMMENT,
    conn: Optional[RestConnection] = None,
) -> Container:
    if conn is None:
        config = RestConfig(
            url=str(rest_config["url"]),
            api_key=str(rest_config.get("api_key", "")),
            timeout=float(rest_config.get("timeout", DEFAULT_REQUEST_TIMEOUT)),
        )
        conn = RestConnection.get_instance(config)

    return build_services(
        users_repo=RestUserRepository(conn),
        courses_repo=RestCourseRepository(conn),
        enrollments_repo=RestEnrollmentRepository(conn),
        attendance_repo=RestAttendanceRepository(conn),
        conn=conn,
        tz_name=tz_name,
        cron_token=cron_token,
        auto_fill_comment=auto_fill_comment,
    )
