from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceCalculator


class StandardAttendanceCalculator(AttendanceCalculator):
    """Standard rule: excused counts as present; (present + late) / total, 0 when empty."""

    _BUCKETS = {
        AttendanceStatus.PRESENT: "present",
        AttendanceStatus.EXCUSED: "present",
        AttendanceStatus.ABSENT: "absent",
        AttendanceStatus.LATE: "late",
    }

    def bucket(self, status: AttendanceStatus) -> str:
        return self._BUCKETS[status]

    def attendance_percentage(self, *, present: int, absent: int, late: int) -> float:
        total = present + absent + late
        if total <= 0:
            return 0.0
        return (present + late) / total * 100
