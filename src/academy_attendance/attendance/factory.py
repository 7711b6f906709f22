from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from ..courses.model import CourseSession
from .clock import SessionClock
from .strategies.base import RecordingStrategy
from .strategies.free_edit_strategy import FreeEditStrategy
from .strategies.late_modification_strategy import LateModificationStrategy
from .strategies.undetermined_window_strategy import UndeterminedWindowStrategy


@dataclass
class RecordingStrategyFactory:
    """Factory Pattern: choose the edit policy from the class window of the selected date."""

    clock: SessionClock = field(default_factory=SessionClock)

    def for_session(self, *, course: CourseSession, on_date: date, now: datetime) -> RecordingStrategy:
        reading = self.clock.evaluate(course, on_date=on_date, now=now)
        if not reading.determinable:
            return UndeterminedWindowStrategy()
        if reading.ended:
            return LateModificationStrategy()
        return FreeEditStrategy()
