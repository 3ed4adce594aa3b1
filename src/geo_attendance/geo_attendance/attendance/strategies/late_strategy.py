from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import minutes_between
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in: minutes past the latest allowed time."""

    def decide_checkin(self, *, now: datetime, threshold: datetime) -> StatusDecision:
        return StatusDecision(is_late=True, late_minutes=max(0, minutes_between(threshold, now)))
