from datetime import date, datetime, timedelta

import pytest

from fakes import make_user
from src.geo_attendance.geo_attendance.attendance.model import AttendanceRecord
from src.geo_attendance.geo_attendance.common.datetime_utils import iter_days
from src.geo_attendance.geo_attendance.core.constants import UNKNOWN_DEPARTMENT
from src.geo_attendance.geo_attendance.core.enums import AttendanceSource, DayStatus, RequestStatus
from src.geo_attendance.geo_attendance.reports.aggregator import aggregate, classify_day, round_half_up
from src.geo_attendance.geo_attendance.requests.model import ExcuseRequest, LeaveRequest

MARCH_START = date(2026, 3, 1)
MARCH_END = date(2026, 3, 31)


def _record(user_id: int, day: date, *, late_minutes: int = 0, rid: int = 1) -> AttendanceRecord:
    check_in = datetime.combine(day, datetime.min.time()).replace(hour=8)
    return AttendanceRecord(
        attendance_id=rid,
        user_id=user_id,
        work_date=day,
        check_in_time=check_in + timedelta(minutes=15 + late_minutes),
        check_out_time=check_in.replace(hour=17),
        is_late=late_minutes > 0,
        late_minutes=late_minutes,
        source=AttendanceSource.APPLICATION,
    )


def _leave(user_id: int, start: date, days: int, status=RequestStatus.APPROVED, rid: int = 1) -> LeaveRequest:
    return LeaveRequest(rid, user_id, start, days, "Family", status, datetime(2026, 2, 20, 9))


def _excuse(user_id: int, day: date, status, *, rid: int = 1, created_at=None) -> ExcuseRequest:
    return ExcuseRequest(rid, user_id, day, "Doctor", status, created_at or datetime(2026, 3, 1, 9))


def test_weekday_attendance_over_one_month():
    user = make_user(10)
    weekdays = [d for d in iter_days(MARCH_START, MARCH_END) if d.weekday() < 5]
    records = [_record(10, d) for d in weekdays]

    report = aggregate([user], records, [], start=MARCH_START, end=MARCH_END)

    assert len(weekdays) == 22
    assert report.summary.days_in_range == 31
    assert report.summary.present_days == 22
    assert report.summary.unjustified_absences == 9
    assert report.summary.attendance_ratio == pytest.approx(22 / 31)
    assert report.summary.attendance_rate_pct == 71
    assert report.summary.total_late_occurrences == 0
    assert report.late_employees == []


def test_every_day_is_classified_exactly_once():
    user = make_user(10)
    records = [_record(10, date(2026, 3, 2)), _record(10, date(2026, 3, 3), late_minutes=12)]
    requests = [
        _leave(10, date(2026, 3, 9), 3),
        _excuse(10, date(2026, 3, 16), RequestStatus.APPROVED, rid=1),
        _excuse(10, date(2026, 3, 17), RequestStatus.REJECTED, rid=2),
        _excuse(10, date(2026, 3, 18), RequestStatus.PENDING, rid=3),
    ]

    report = aggregate([user], records, requests, start=MARCH_START, end=MARCH_END)
    [emp] = report.employees

    assert sum(emp.status_counts.values()) == 31
    assert len(emp.days) == 31
    assert emp.count(DayStatus.PRESENT) == 1
    assert emp.count(DayStatus.LATE) == 1
    assert emp.count(DayStatus.ON_LEAVE) == 3
    assert emp.count(DayStatus.EXCUSE_ACCEPTED) == 1
    assert emp.count(DayStatus.EXCUSE_REJECTED) == 1
    assert emp.count(DayStatus.UNDER_REVIEW) == 1
    assert emp.count(DayStatus.UNJUSTIFIED) == 23


def test_record_takes_precedence_over_leave_and_excuse():
    day = date(2026, 3, 10)
    leaves = [_leave(10, day, 1)]
    excuses = [_excuse(10, day, RequestStatus.APPROVED)]

    assert classify_day(day, _record(10, day, late_minutes=4), leaves, excuses) == DayStatus.LATE
    assert classify_day(day, None, leaves, excuses) == DayStatus.ON_LEAVE


def test_pending_or_rejected_leave_does_not_cover_the_day():
    day = date(2026, 3, 10)

    assert classify_day(day, None, [_leave(10, day, 2, status=RequestStatus.PENDING)], []) == DayStatus.UNJUSTIFIED
    assert classify_day(day, None, [_leave(10, day, 2, status=RequestStatus.REJECTED)], []) == DayStatus.UNJUSTIFIED


def test_latest_excuse_for_a_day_wins():
    day = date(2026, 3, 10)
    excuses = [
        _excuse(10, day, RequestStatus.REJECTED, rid=1, created_at=datetime(2026, 3, 10, 9)),
        _excuse(10, day, RequestStatus.PENDING, rid=2, created_at=datetime(2026, 3, 10, 12)),
    ]

    assert classify_day(day, None, [], excuses) == DayStatus.UNDER_REVIEW


def test_late_totals_and_average():
    user = make_user(10)
    records = [
        _record(10, date(2026, 3, 2), late_minutes=10),
        _record(10, date(2026, 3, 3), late_minutes=25),
        _record(10, date(2026, 3, 4)),
    ]

    report = aggregate([user], records, [], start=MARCH_START, end=MARCH_END)
    [emp] = report.employees

    assert emp.late_days == 2
    assert emp.total_late_minutes == 35
    assert emp.average_late_minutes == 17.5
    assert emp.late_hours_label == "0.58"
    assert report.late_employees == [emp]


def test_employee_without_records_counts_only_in_denominator():
    present = make_user(10)
    absent = make_user(11)
    records = [_record(10, d) for d in iter_days(MARCH_START, MARCH_END)]

    report = aggregate([present, absent], records, [], start=MARCH_START, end=MARCH_END)
    absent_report = report.employees[1]

    assert absent_report.late_days == 0
    assert absent_report.total_late_minutes == 0
    assert absent_report.average_late_minutes == 0.0
    assert absent_report.count(DayStatus.UNJUSTIFIED) == 31
    assert absent_report not in report.late_employees
    assert report.summary.attendance_rate_pct == 50


def test_top_department_by_late_minutes():
    sales = make_user(10, department="Sales")
    ops = make_user(11, department="Operations")
    ops2 = make_user(12, department="Operations")
    records = [
        _record(10, date(2026, 3, 2), late_minutes=30),
        _record(11, date(2026, 3, 2), late_minutes=20),
        _record(12, date(2026, 3, 2), late_minutes=20),
    ]

    report = aggregate([sales, ops, ops2], records, [], start=MARCH_START, end=MARCH_END)

    assert report.summary.top_late_department == "Operations"
    assert report.summary.department_late_minutes == {"Sales": 30, "Operations": 40}


def test_top_department_tie_keeps_first_seen():
    a = make_user(10, department="Sales")
    b = make_user(11, department="Support")
    records = [_record(10, date(2026, 3, 2), late_minutes=15), _record(11, date(2026, 3, 2), late_minutes=15)]

    report = aggregate([a, b], records, [], start=MARCH_START, end=MARCH_END)

    assert report.summary.top_late_department == "Sales"


def test_no_lateness_means_no_top_department():
    report = aggregate([make_user(10, department="")], [], [], start=MARCH_START, end=MARCH_END)

    assert report.summary.top_late_department is None
    assert report.employees[0].department == UNKNOWN_DEPARTMENT


def test_empty_employee_set():
    report = aggregate([], [], [], start=MARCH_START, end=MARCH_END)

    assert report.summary.attendance_ratio == 0.0
    assert report.summary.attendance_rate_pct == 0


@pytest.mark.parametrize("value, expected", [(70.5, 71), (70.49, 70), (0.5, 1), (2.5, 3)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
