from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.constants import ARRIVAL_COMMENT_PATTERN, ARRIVAL_COMMENT_PREFIX
from ..core.enums import AttendanceStatus

_ARRIVAL_RE = re.compile(ARRIVAL_COMMENT_PATTERN)


def arrival_comment(arrival: time) -> str:
    """Legacy comment text carrying the time of entry, e.g. 'Hora: 14:05'."""

    return f"{ARRIVAL_COMMENT_PREFIX}{arrival.strftime('%H:%M')}"


def extract_arrival_time(comment: Optional[str]) -> Optional[time]:
    """Read the time of entry back out of a legacy 'Hora: HH:MM' comment."""

    if not comment:
        return None
    m = _ARRIVAL_RE.search(comment)
    if not m:
        return None
    value = m.group(1)
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    try:
        return datetime.strptime(value, fmt).time()
    except ValueError:
        return None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one status for one student, one course, one calendar date."""

    attendance_id: int
    course_id: int
    student_id: int
    attendance_date: date
    status: AttendanceStatus
    comment: Optional[str] = None
    arrival_time: Optional[time] = None
    recorded_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def natural_key(self) -> tuple[int, int, date]:
        return (self.course_id, self.student_id, self.attendance_date)


@dataclass(frozen=True)
class NewAttendance:
    """Write-model for a row that does not exist yet."""

    course_id: int
    student_id: int
    attendance_date: date
    status: AttendanceStatus
    comment: Optional[str] = None
    arrival_time: Optional[time] = None
    recorded_by: Optional[int] = None

    @property
    def natural_key(self) -> tuple[int, int, date]:
        return (self.course_id, self.student_id, self.attendance_date)


@dataclass(frozen=True)
class AttendanceChange:
    """Partial update applied to an existing row."""

    status: AttendanceStatus
    comment: Optional[str] = None
    arrival_time: Optional[time] = None
    recorded_by: Optional[int] = None
