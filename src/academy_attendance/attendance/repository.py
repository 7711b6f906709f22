from __future__ import annotations

from datetime import date
from typing import Literal, Optional, Protocol, Sequence

from .model import AttendanceChange, AttendanceRecord, NewAttendance

ConflictPolicy = Literal["ignore", "merge"]


class AttendanceRepository(Protocol):
    """Attendance Record Store.

    Note: Every call is a network round-trip with no transaction spanning calls.
    Rows are unique per (course, student, date) in the store.
    """

    def find(self, course_id: int, on_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def exists(self, course_id: int, on_date: date) -> bool:
        """True when the session has any row for the date, whatever its status."""

        raise NotImplementedError

    def find_by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_by_course(self, course_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_by_date(self, on_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: NewAttendance) -> AttendanceRecord:
        """Raises ConflictError when a row already exists for the natural key."""

        raise NotImplementedError

    def bulk_create(
        self,
        records: Sequence[NewAttendance],
        *,
        on_conflict: ConflictPolicy = "ignore",
    ) -> Sequence[AttendanceRecord]:
        """Insert many rows in one request.

        ``ignore`` leaves rows that already exist untouched, ``merge`` overwrites them.
        Returns the rows actually written.
        """

        raise NotImplementedError

    def update(self, attendance_id: int, change: AttendanceChange) -> AttendanceRecord:
        """Raises NotFoundError when no row has this id."""

        raise NotImplementedError

    def delete(self, attendance_id: int) -> None:
        """Admin-only. Raises NotFoundError when no row has this id."""

        raise NotImplementedError
