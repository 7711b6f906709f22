from datetime import date, datetime

from academy_attendance.attendance.factory import RecordingStrategyFactory
from academy_attendance.attendance.strategies.free_edit_strategy import FreeEditStrategy
from academy_attendance.attendance.strategies.late_modification_strategy import LateModificationStrategy
from academy_attendance.attendance.strategies.undetermined_window_strategy import UndeterminedWindowStrategy
from academy_attendance.core.constants import LATE_MODIFICATION_WARNING


def test_factory_free_edit_while_class_running(course_factory):
    factory = RecordingStrategyFactory()
    strategy = factory.for_session(course=course_factory(), on_date=date(2025, 3, 3), now=datetime(2025, 3, 3, 9, 0))

    assert isinstance(strategy, FreeEditStrategy)
    decision = strategy.decide(editing=False)
    assert decision.can_edit_freely is True
    assert decision.late_modification is False


def test_factory_late_modification_after_class(course_factory):
    factory = RecordingStrategyFactory()
    strategy = factory.for_session(course=course_factory(), on_date=date(2025, 3, 3), now=datetime(2025, 3, 3, 11, 0))

    assert isinstance(strategy, LateModificationStrategy)
    decision = strategy.decide(editing=True)
    assert decision.can_edit_freely is False
    assert decision.late_modification is True
    assert decision.warning == LATE_MODIFICATION_WARNING


def test_factory_undetermined_window(course_factory):
    factory = RecordingStrategyFactory()
    strategy = factory.for_session(
        course=course_factory(window="08:00"), on_date=date(2025, 3, 3), now=datetime(2025, 3, 3, 11, 0)
    )

    assert isinstance(strategy, UndeterminedWindowStrategy)
    assert strategy.decide(editing=False).can_edit_freely is True
