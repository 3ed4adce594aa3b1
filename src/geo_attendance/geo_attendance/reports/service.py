from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local, previous_month_range
from ..core.constants import DEFAULT_REPORT_DAYS, MONTHLY_REPORT_TITLE
from ..core.enums import DayStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..requests.repository import RequestRepository
from ..settings.model import ReportSections
from ..settings.store import SettingsStore
from ..users.model import User
from ..users.repository import UserRepository
from .aggregator import aggregate
from .model import AttendanceReport

logger = logging.getLogger(__name__)


def default_range(today: date) -> tuple[date, date]:
    """Trailing window of DEFAULT_REPORT_DAYS days ending today."""
    return today - timedelta(days=DEFAULT_REPORT_DAYS - 1), today


def report_payload(report: AttendanceReport, sections: ReportSections) -> dict:
    """Serialize a report, keeping only the sections switched on in settings."""
    payload: dict = {
        "start": report.start.isoformat(),
        "end": report.end.isoformat(),
        "summary": report.summary.to_dict(),
        "employees": [e.to_dict(with_days=False) for e in report.employees],
    }

    if sections.late_list:
        payload["late_employees"] = [e.to_dict() for e in report.late_employees]
    if sections.total_late_hours:
        payload["total_late_hours"] = f"{report.summary.total_late_minutes / 60:.2f}"
    if sections.unexcused_absences:
        payload["unexcused_absences"] = [
            {"user_id": e.user_id, "name": e.full_name, "days": e.count(DayStatus.UNJUSTIFIED)}
            for e in report.employees
            if e.count(DayStatus.UNJUSTIFIED)
        ]
    if sections.leave_and_excuse_summary:
        payload["leave_and_excuse_summary"] = {
            status.value: sum(e.count(status) for e in report.employees)
            for status in (
                DayStatus.ON_LEAVE,
                DayStatus.EXCUSE_ACCEPTED,
                DayStatus.EXCUSE_REJECTED,
                DayStatus.UNDER_REVIEW,
            )
        }
    if sections.department_comparison:
        payload["department_late_minutes"] = report.summary.department_late_minutes

    return payload


class ReportService:
    """Use case: attendance reports over a date range (read-only)."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        requests: RequestRepository,
        users: UserRepository,
        settings: SettingsStore,
        notifications: NotificationService,
    ):
        self._attendance = attendance
        self._requests = requests
        self._users = users
        self._settings = settings
        self._notifications = notifications

    def _employees(self, user_ids: Optional[Sequence[int]]) -> list[User]:
        if not user_ids:
            return list(self._users.list_employees())

        employees: list[User] = []
        for user_id in user_ids:
            user = self._users.get_by_id(int(user_id))
            if not user:
                raise NotFoundError(f"Employee {user_id} not found")
            if user.role != Role.EMPLOYEE:
                raise ValidationError(f"User {user_id} is not an employee")
            employees.append(user)
        return employees

    def build_report(
        self,
        *,
        current_role: Role,
        start: Optional[date] = None,
        end: Optional[date] = None,
        user_ids: Optional[Sequence[int]] = None,
        today: Optional[date] = None,
    ) -> AttendanceReport:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")

        if start is None or end is None:
            default_start, default_end = default_range(today or now_local().date())
            start = start or default_start
            end = end or default_end
        if start > end:
            raise ValidationError("Report start date must not be after the end date")

        return self._build(start, end, user_ids)

    def _build(self, start: date, end: date, user_ids: Optional[Sequence[int]]) -> AttendanceReport:
        employees = self._employees(user_ids)
        ids = [e.user_id for e in employees]
        records = self._attendance.list_in_range(start_date=start, end_date=end, user_ids=ids)
        requests = self._requests.list_in_range(start_date=start, end_date=end, user_ids=ids)
        return aggregate(employees, records, requests, start=start, end=end)

    def monthly_report(self, *, current_role: Role, today: Optional[date] = None) -> AttendanceReport:
        """Report over the calendar month before ``today``."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")
        start, end = previous_month_range(today or now_local().date())
        return self._build(start, end, None)

    def payload(self, report: AttendanceReport) -> dict:
        return report_payload(report, self._settings.get().report_sections)

    def run_scheduled_monthly_report(self, *, now: Optional[datetime] = None) -> bool:
        """Generate the prior month's report on the configured day, once.

        Administrators get a summary notification; returns True when it ran.
        """
        now = now or now_local()
        today = now.date()
        settings = self._settings.get()

        if today.day != settings.auto_report_day:
            return False
        if self._notifications.exists_today(title=MONTHLY_REPORT_TITLE, day=today):
            return False

        report = self.monthly_report(current_role=Role.ADMIN, today=today)
        summary = report.summary
        message = (
            f"{report.start:%B %Y}: attendance {summary.attendance_rate_pct}%, "
            f"{summary.total_late_occurrences} late arrivals, "
            f"{summary.unjustified_absences} unjustified absences"
        )
        if summary.top_late_department:
            message += f", most late minutes in {summary.top_late_department}"
        self._notifications.notify_admins(MONTHLY_REPORT_TITLE, message, now=now)
        logger.info("Monthly report for %s generated", report.start.strftime("%Y-%m"))
        return True
