from __future__ import annotations

import unicodedata
from enum import Enum, IntEnum

from .exceptions import ValidationError


def _fold(value: str) -> str:
    """Lowercase and strip accents so 'Miércoles' == 'miercoles'."""

    decomposed = unicodedata.normalize("NFKD", value.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


class Role(str, Enum):
    """User role used for access control."""

    ADMIN = "admin"
    TEACHER = "profesor"
    STUDENT = "estudiante"

    @classmethod
    def parse(cls, value: str) -> "Role":
        v = _fold(value or "")
        # Older rows store teachers as "teacher".
        if v == "teacher":
            return cls.TEACHER
        for role in cls:
            if role.value == v:
                return role
        raise ValidationError(f"Rol desconocido: {value!r}")


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the `asistencia.estado` column."""

    PRESENT = "Presente"
    ABSENT = "Ausente"
    LATE = "Tardanza"
    EXCUSED = "Justificado"

    @classmethod
    def parse(cls, value: str) -> "AttendanceStatus":
        v = _fold(value or "")
        for status in cls:
            if _fold(status.value) == v or status.name.lower() == v:
                return status
        raise ValidationError(f"Estado de asistencia desconocido: {value!r}")

    @property
    def records_arrival(self) -> bool:
        """Present and late rows carry the wall-clock time of entry."""

        return self in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


class CourseStatus(str, Enum):
    ACTIVE = "Activo"
    INACTIVE = "Inactivo"
    CANCELLED = "Cancelado"
    FINISHED = "Finalizado"

    @classmethod
    def parse(cls, value: str) -> "CourseStatus":
        v = _fold(value or "")
        for status in cls:
            if _fold(status.value) == v:
                return status
        raise ValidationError(f"Estado de curso desconocido: {value!r}")


class EnrollmentStatus(str, Enum):
    ENROLLED = "Inscrito"
    WITHDRAWN = "Retirado"
    FINISHED = "Finalizado"

    @classmethod
    def parse(cls, value: str) -> "EnrollmentStatus":
        v = _fold(value or "")
        for status in cls:
            if _fold(status.value) == v:
                return status
        raise ValidationError(f"Estado de inscripción desconocido: {value!r}")


class Weekday(IntEnum):
    """Day of week; the value matches ``date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        return _WEEKDAY_LABELS[self]

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        day = _WEEKDAY_BY_NAME.get(_fold(value or ""))
        if day is None:
            raise ValidationError(f"Día de la semana desconocido: {value!r}")
        return day


_WEEKDAY_LABELS = {
    Weekday.MONDAY: "Lunes",
    Weekday.TUESDAY: "Martes",
    Weekday.WEDNESDAY: "Miércoles",
    Weekday.THURSDAY: "Jueves",
    Weekday.FRIDAY: "Viernes",
    Weekday.SATURDAY: "Sábado",
    Weekday.SUNDAY: "Domingo",
}

_WEEKDAY_BY_NAME = {_fold(label): day for day, label in _WEEKDAY_LABELS.items()}
_WEEKDAY_BY_NAME.update({day.name.lower(): day for day in Weekday})


class RegistrationState(str, Enum):
    """States of the manual attendance registration workflow."""

    NO_RECORD = "NO_RECORD"
    RECORDING = "RECORDING"
    PENDING_CONFIRMATION = "PENDING_CONFIRMATION"
    SAVED = "SAVED"
