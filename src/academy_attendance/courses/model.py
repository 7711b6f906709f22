from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import time
from typing import FrozenSet, Optional

from ..core.enums import CourseStatus, Weekday
from ..core.exceptions import ValidationError

_WINDOW_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*-\s*(\d{1,2}):(\d{2})\s*$")


@dataclass(frozen=True)
class TimeWindow:
    """Start/end time of a class, the same on every scheduled day."""

    start: time
    end: time

    def __post_init__(self):
        if self.start >= self.end:
            raise ValidationError("La hora de inicio debe ser anterior a la hora de fin")

    @classmethod
    def parse(cls, value: str) -> "TimeWindow":
        """Parse the stored 'HH:MM - HH:MM' representation."""

        m = _WINDOW_RE.match(value or "")
        if not m:
            raise ValidationError(f"Horario no válido (HH:MM - HH:MM): {value!r}")
        sh, sm, eh, em = (int(g) for g in m.groups())
        try:
            return cls(start=time(sh, sm), end=time(eh, em))
        except ValueError:
            raise ValidationError(f"Horario no válido (HH:MM - HH:MM): {value!r}")

    def format(self) -> str:
        return f"{self.start.strftime('%H:%M')} - {self.end.strftime('%H:%M')}"


def parse_weekdays(value: str) -> tuple[FrozenSet[Weekday], list[str]]:
    """Split a comma-joined day list into weekdays.

    Returns the parsed set and the tokens that were not recognised.
    """

    days: set[Weekday] = set()
    unknown: list[str] = []
    for token in (value or "").split(","):
        token = token.strip()
        if not token:
            continue
        try:
            days.add(Weekday.parse(token))
        except ValidationError:
            unknown.append(token)
    return frozenset(days), unknown


@dataclass(frozen=True)
class CourseSession:
    """Domain entity: a recurring scheduled class (table `cursos`)."""

    course_id: int
    subject_id: Optional[int]
    teacher_id: Optional[int]
    classroom_id: Optional[int]
    days_of_week: FrozenSet[Weekday]
    time_window: Optional[TimeWindow]
    status: CourseStatus
    capacity: int = 0
    schedule_text: str = ""
    subject_name: Optional[str] = None
    teacher_name: Optional[str] = None
    classroom_name: Optional[str] = None
    period_id: Optional[int] = None
    enrolled_count: int = field(default=0, compare=False)

    @property
    def is_active(self) -> bool:
        return self.status == CourseStatus.ACTIVE

    def display_subject(self) -> str:
        return self.subject_name or f"Curso {self.course_id}"

    def display_teacher(self) -> str:
        return self.teacher_name or f"Profesor {self.teacher_id}"
