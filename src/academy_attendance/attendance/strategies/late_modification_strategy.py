from __future__ import annotations

from ...core.constants import LATE_MODIFICATION_WARNING
from .base import RecordingDecision, RecordingStrategy


class LateModificationStrategy(RecordingStrategy):
    """Class window already over: recording is allowed but flagged."""

    def decide(self, *, editing: bool) -> RecordingDecision:
        return RecordingDecision(can_edit_freely=False, late_modification=True, warning=LATE_MODIFICATION_WARNING)
