from datetime import date, datetime

import pytest

from src.geo_attendance.geo_attendance.core.constants import MONTHLY_REPORT_TITLE
from src.geo_attendance.geo_attendance.core.enums import Role
from src.geo_attendance.geo_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.geo_attendance.geo_attendance.locations.model import Coordinate
from src.geo_attendance.geo_attendance.reports.service import default_range

INSIDE = Coordinate(24.7136, 46.6753)


def test_default_range_is_trailing_two_weeks():
    assert default_range(date(2026, 3, 14)) == (date(2026, 3, 1), date(2026, 3, 14))


def test_report_is_admin_only(container):
    with pytest.raises(AuthorizationError):
        container.report_service.build_report(current_role=Role.EMPLOYEE)


def test_report_rejects_inverted_range(container):
    with pytest.raises(ValidationError):
        container.report_service.build_report(
            current_role=Role.ADMIN, start=date(2026, 3, 10), end=date(2026, 3, 1)
        )


def test_report_rejects_unknown_employee(container):
    with pytest.raises(NotFoundError):
        container.report_service.build_report(
            current_role=Role.ADMIN, start=date(2026, 3, 1), end=date(2026, 3, 2), user_ids=[404]
        )


def test_report_rejects_admin_ids(container, admin, employee):
    with pytest.raises(ValidationError):
        container.report_service.build_report(
            current_role=Role.ADMIN,
            start=date(2026, 3, 1),
            end=date(2026, 3, 2),
            user_ids=[employee.user_id, admin.user_id],
        )


def test_report_reads_persisted_attendance(container, employee, fixed_now):
    container.attendance_service.check_in(employee.user_id, position=INSIDE, now=fixed_now)

    report = container.report_service.build_report(
        current_role=Role.ADMIN, start=date(2026, 3, 9), end=date(2026, 3, 9)
    )

    [emp] = report.employees
    assert emp.user_id == employee.user_id
    assert emp.late_days == 1
    assert emp.total_late_minutes == 5
    assert report.summary.attendance_rate_pct == 100
    assert report.summary.top_late_department == "Sales"


def test_payload_honours_section_toggles(container, employee, fixed_now):
    container.attendance_service.check_in(employee.user_id, position=INSIDE, now=fixed_now)
    report = container.report_service.build_report(
        current_role=Role.ADMIN, start=date(2026, 3, 9), end=date(2026, 3, 10)
    )

    full = container.report_service.payload(report)
    assert full["total_late_hours"] == "0.08"
    assert full["late_employees"][0]["user_id"] == employee.user_id
    assert full["unexcused_absences"] == [{"user_id": employee.user_id, "name": employee.full_name, "days": 1}]
    assert full["department_late_minutes"] == {"Sales": 5}

    container.settings_service.update(
        current_role=Role.ADMIN,
        changes={"report_sections": {"late_list": False, "department_comparison": False}},
    )
    trimmed = container.report_service.payload(report)

    assert "late_employees" not in trimmed
    assert "department_late_minutes" not in trimmed
    assert "total_late_hours" in trimmed
    assert trimmed["summary"] == full["summary"]


def test_monthly_report_covers_previous_month(container):
    report = container.report_service.monthly_report(current_role=Role.ADMIN, today=date(2026, 3, 25))

    assert (report.start, report.end) == (date(2026, 2, 1), date(2026, 2, 28))


def test_scheduled_monthly_report_runs_once_on_report_day(container, admin):
    report_day = datetime(2026, 3, 25, 6, 0)

    assert container.report_service.run_scheduled_monthly_report(now=report_day.replace(day=24)) is False
    assert container.report_service.run_scheduled_monthly_report(now=report_day) is True
    assert container.report_service.run_scheduled_monthly_report(now=report_day.replace(hour=18)) is False

    [note] = container.notifications_repo.titled(MONTHLY_REPORT_TITLE)
    assert note.target.user_ids == {admin.user_id}
    assert note.message.startswith("February 2026")
