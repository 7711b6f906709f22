from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from ..core.constants import UNDETERMINED_WINDOW_WARNING
from ..core.enums import Weekday
from ..core.exceptions import ValidationError
from ..courses.model import CourseSession, TimeWindow

logger = logging.getLogger(__name__)

WindowLike = Union[CourseSession, TimeWindow, str, None]


@dataclass(frozen=True)
class ClockReading:
    ended: bool
    determinable: bool = True
    warning: Optional[str] = None


class SessionClock:
    """Decides whether a class window is over on a given calendar date.

    Comparisons are calendar-naive: ``now`` and the window are both local wall-clock.
    The window is combined with ``on_date`` itself, so past dates are always over
    and future dates never are.
    """

    @staticmethod
    def _window(value: WindowLike) -> Optional[TimeWindow]:
        if isinstance(value, CourseSession):
            if value.time_window is not None:
                return value.time_window
            value = value.schedule_text
        if isinstance(value, TimeWindow):
            return value
        if not value:
            return None
        try:
            return TimeWindow.parse(value)
        except ValidationError:
            return None

    def evaluate(self, value: WindowLike, *, on_date: date, now: datetime) -> ClockReading:
        window = self._window(value)
        if window is None:
            # Fail open: an unreadable schedule must not block recording.
            logger.warning("Cannot determine class window from %r", getattr(value, "schedule_text", value))
            return ClockReading(ended=False, determinable=False, warning=UNDETERMINED_WINDOW_WARNING)

        end_at = datetime.combine(on_date, window.end)
        return ClockReading(ended=now > end_at)

    def has_ended(self, value: WindowLike, *, on_date: date, now: datetime) -> bool:
        return self.evaluate(value, on_date=on_date, now=now).ended

    @staticmethod
    def runs_on(course: CourseSession, on_date: date) -> bool:
        return Weekday(on_date.weekday()) in course.days_of_week

    def ended_today(self, course: CourseSession, *, now: datetime) -> bool:
        """True when the course is scheduled today and today's window is over."""

        today = now.date()
        if not self.runs_on(course, today):
            return False
        return self.has_ended(course, on_date=today, now=now)
