from datetime import datetime, time

from src.geo_attendance.geo_attendance.attendance.factory import AttendanceStrategyFactory
from src.geo_attendance.geo_attendance.attendance.strategies.late_strategy import LateStrategy
from src.geo_attendance.geo_attendance.attendance.strategies.normal_strategy import NormalStrategy
from src.geo_attendance.geo_attendance.settings.model import SystemSettings


def test_factory_checkin_exactly_at_threshold_is_on_time():
    threshold = datetime(2026, 3, 9, 8, 15)

    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(now=threshold, threshold=threshold)

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkin_one_second_after_threshold_is_late():
    threshold = datetime(2026, 3, 9, 8, 15)
    now = datetime(2026, 3, 9, 8, 15, 1)

    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(now=now, threshold=threshold)

    assert isinstance(strategy, LateStrategy)


def test_decide_counts_late_minutes_from_latest_allowed_time():
    decision = AttendanceStrategyFactory().decide(now=datetime(2026, 3, 9, 8, 20), settings=SystemSettings())

    assert decision.is_late is True
    assert decision.late_minutes == 5


def test_decide_rounds_half_minutes_up():
    settings = SystemSettings(latest_allowed_time=time(9, 0))
    decision = AttendanceStrategyFactory().decide(now=datetime(2026, 3, 9, 9, 2, 30), settings=settings)

    assert decision.late_minutes == 3


def test_decide_on_time_has_zero_minutes():
    decision = AttendanceStrategyFactory().decide(now=datetime(2026, 3, 9, 7, 59), settings=SystemSettings())

    assert decision.is_late is False
    assert decision.late_minutes == 0
