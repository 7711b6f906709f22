from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.enums import AttendanceStatus


class AttendanceCalculator(ABC):
    """Calculator interface (Strategy Pattern for attendance statistics)."""

    @abstractmethod
    def bucket(self, status: AttendanceStatus) -> str:
        """Which counter a status goes to: 'present', 'absent' or 'late'."""

        raise NotImplementedError

    @abstractmethod
    def attendance_percentage(self, *, present: int, absent: int, late: int) -> float:
        raise NotImplementedError
