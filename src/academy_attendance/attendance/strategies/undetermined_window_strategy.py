from __future__ import annotations

from ...core.constants import UNDETERMINED_WINDOW_WARNING
from .base import RecordingDecision, RecordingStrategy


class UndeterminedWindowStrategy(RecordingStrategy):
    """Schedule could not be read; fail open with a soft warning."""

    def decide(self, *, editing: bool) -> RecordingDecision:
        return RecordingDecision(can_edit_freely=True, late_modification=False, warning=UNDETERMINED_WINDOW_WARNING)
