from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RecordingDecision:
    can_edit_freely: bool
    late_modification: bool
    warning: Optional[str] = None


class RecordingStrategy(ABC):
    """Strategy Pattern: encapsulate how a registration is gated by the class window."""

    @abstractmethod
    def decide(self, *, editing: bool) -> RecordingDecision:
        raise NotImplementedError
