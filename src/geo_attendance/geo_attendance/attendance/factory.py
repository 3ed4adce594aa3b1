from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import combine_like
from ..settings.model import SystemSettings
from .strategies.base import AttendanceStrategy, StatusDecision
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


def late_threshold(now: datetime, settings: SystemSettings) -> datetime:
    return combine_like(now.date(), settings.latest_allowed_time, now)


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, now: datetime, threshold: datetime) -> AttendanceStrategy:
        if now > threshold:
            return LateStrategy()
        return NormalStrategy()

    def decide(self, *, now: datetime, settings: SystemSettings) -> StatusDecision:
        threshold = late_threshold(now, settings)
        return self.for_checkin(now=now, threshold=threshold).decide_checkin(now=now, threshold=threshold)
