from datetime import datetime

import pytest

from fakes import HEAD_OFFICE, build_fake_container, make_user
from src.geo_attendance.geo_attendance.core.enums import AttendanceSource, AttendanceState, Role
from src.geo_attendance.geo_attendance.device.model import parse_device_log
from src.geo_attendance.geo_attendance.locations.model import Coordinate


@pytest.fixture
def device_user():
    return make_user(20, device_user_id="1001")


@pytest.fixture
def device_container(device_user):
    admin = make_user(1, role=Role.ADMIN)
    return build_fake_container(users=[admin, device_user], locations=[HEAD_OFFICE])


LOGS = [
    {"uid": "1001", "attendanceTime": "2026-03-09T17:05:00"},
    {"userId": "1001", "timestamp": "2026-03-09T08:10:00"},
    {"uid": "1001", "attendanceTime": "2026-03-09T12:00:00"},
]


def test_parse_device_log_key_variants():
    event = parse_device_log({"user_id": 7, "time": "2026-03-09T08:00:00"})

    assert event.device_user_id == "7"
    assert event.timestamp == datetime(2026, 3, 9, 8, 0)


@pytest.mark.parametrize("log", [{}, {"uid": "1"}, {"uid": "1", "timestamp": "yesterday"}])
def test_parse_device_log_rejects_unusable_entries(log):
    assert parse_device_log(log) is None


def test_first_punch_checks_in_and_later_punch_checks_out(device_container, device_user):
    result = device_container.device_service.import_logs(LOGS[:2])

    assert result.checked_in == 1
    assert result.checked_out == 1
    record = device_container.attendance_repo.get_for_user_and_date(device_user.user_id, datetime(2026, 3, 9).date())
    assert record.source == AttendanceSource.BIOMETRIC_DEVICE
    assert record.check_in_time == datetime(2026, 3, 9, 8, 10)
    assert record.check_out_time == datetime(2026, 3, 9, 17, 5)
    assert record.is_late is False
    assert record.location_id is None


def test_reimporting_the_same_batch_changes_nothing(device_container, device_user):
    device_container.device_service.import_logs(LOGS)
    before = device_container.attendance_repo.all()

    again = device_container.device_service.import_logs(LOGS)

    assert again.checked_in == 0
    assert again.checked_out == 0
    assert again.ignored == 3
    assert device_container.attendance_repo.all() == before


def test_unknown_and_malformed_logs_are_counted(device_container):
    result = device_container.device_service.import_logs(
        [{"uid": "9999", "attendanceTime": "2026-03-09T08:00:00"}, {"nothing": True}, "garbage"]
    )

    assert result.unknown_user == 1
    assert result.invalid == 2


def test_device_checkin_skips_excuse_gate_and_notifications(device_container, device_user):
    result = device_container.device_service.import_logs(
        [{"uid": "1001", "attendanceTime": f"2026-03-0{d}T09:00:00"} for d in (2, 3, 4, 5)]
    )

    assert result.checked_in == 4
    assert device_container.notifications_repo.items == []


def test_device_punch_cannot_close_an_app_record(device_container, device_user):
    device_container.attendance_service.check_in(
        device_user.user_id, position=Coordinate(24.7136, 46.6753), now=datetime(2026, 3, 9, 8, 0)
    )

    result = device_container.device_service.import_logs([{"uid": "1001", "attendanceTime": "2026-03-09T17:00:00"}])

    assert result.rejected == 1
    state, _ = device_container.attendance_service.today_state(device_user.user_id, today=datetime(2026, 3, 9).date())
    assert state == AttendanceState.CHECKED_IN
