from __future__ import annotations

from datetime import datetime

from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in."""

    def decide_checkin(self, *, now: datetime, threshold: datetime) -> StatusDecision:
        return StatusDecision(is_late=False, late_minutes=0)
