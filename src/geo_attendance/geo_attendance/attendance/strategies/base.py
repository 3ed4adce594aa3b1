from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class StatusDecision:
    is_late: bool
    late_minutes: int = 0


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide the lateness of a check-in."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, threshold: datetime) -> StatusDecision:
        raise NotImplementedError
