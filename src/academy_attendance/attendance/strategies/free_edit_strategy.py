from __future__ import annotations

from .base import RecordingDecision, RecordingStrategy


class FreeEditStrategy(RecordingStrategy):
    """Class window still open (or in the future)."""

    def decide(self, *, editing: bool) -> RecordingDecision:
        return RecordingDecision(can_edit_freely=True, late_modification=False)
