"""Monthly report aggregation over persisted attendance and requests.

Every employee-day in the range is classified exactly once, in precedence
order: attendance record (LATE / PRESENT), approved leave covering the day
(ON_LEAVE), excuse request for the day (by its status), otherwise UNJUSTIFIED.
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import iter_days
from ..core.constants import UNKNOWN_DEPARTMENT
from ..core.enums import DayStatus, RequestStatus
from ..requests.model import ExcuseRequest, LeaveRequest, Request
from ..users.model import User
from .model import AttendanceReport, DayDetail, EmployeeReport, ReportSummary

_EXCUSE_STATUS = {
    RequestStatus.APPROVED: DayStatus.EXCUSE_ACCEPTED,
    RequestStatus.REJECTED: DayStatus.EXCUSE_REJECTED,
    RequestStatus.PENDING: DayStatus.UNDER_REVIEW,
}

PRESENT_STATUSES = (DayStatus.PRESENT, DayStatus.LATE)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def classify_day(
    day: date,
    record: Optional[AttendanceRecord],
    leaves: Iterable[LeaveRequest],
    excuses: Iterable[ExcuseRequest],
) -> DayStatus:
    if record is not None:
        return DayStatus.LATE if record.is_late else DayStatus.PRESENT

    if any(lv.status == RequestStatus.APPROVED and lv.covers(day) for lv in leaves):
        return DayStatus.ON_LEAVE

    same_day = [ex for ex in excuses if ex.excuse_date == day]
    if same_day:
        # several excuses for one day: the latest submission wins
        latest = max(same_day, key=lambda ex: (ex.created_at, ex.request_id))
        return _EXCUSE_STATUS[latest.status]

    return DayStatus.UNJUSTIFIED


def _department(user: User) -> str:
    return (user.department or "").strip() or UNKNOWN_DEPARTMENT


def aggregate_employee(
    user: User,
    days: Sequence[date],
    records: Iterable[AttendanceRecord],
    requests: Iterable[Request],
) -> EmployeeReport:
    by_day = {r.work_date: r for r in records if r.user_id == user.user_id}
    leaves = [r for r in requests if isinstance(r, LeaveRequest) and r.user_id == user.user_id]
    excuses = [r for r in requests if isinstance(r, ExcuseRequest) and r.user_id == user.user_id]

    details: list[DayDetail] = []
    counts: dict[DayStatus, int] = {s: 0 for s in DayStatus}
    late_minutes_total = 0

    for day in days:
        record = by_day.get(day)
        status = classify_day(day, record, leaves, excuses)
        minutes = record.late_minutes if status == DayStatus.LATE else 0
        late_minutes_total += minutes
        counts[status] += 1
        details.append(DayDetail(day=day, status=status, late_minutes=minutes))

    late_days = counts[DayStatus.LATE]
    return EmployeeReport(
        user_id=user.user_id,
        full_name=user.full_name,
        department=_department(user),
        late_days=late_days,
        total_late_minutes=late_minutes_total,
        average_late_minutes=round(late_minutes_total / late_days, 1) if late_days else 0.0,
        days=details,
        status_counts=counts,
    )


def top_department(employees: Iterable[EmployeeReport]) -> tuple[Optional[str], dict[str, int]]:
    """Department with the most late minutes; ties keep the first seen."""
    per_department: dict[str, int] = defaultdict(int)
    for e in employees:
        per_department[e.department] += e.total_late_minutes

    best: Optional[str] = None
    best_minutes = 0
    for name, minutes in per_department.items():
        if minutes > best_minutes:
            best, best_minutes = name, minutes
    return best, dict(per_department)


def aggregate(
    employees: Sequence[User],
    records: Iterable[AttendanceRecord],
    requests: Iterable[Request],
    *,
    start: date,
    end: date,
) -> AttendanceReport:
    days = list(iter_days(start, end))
    records = list(records)
    requests = list(requests)

    reports = [aggregate_employee(user, days, records, requests) for user in employees]

    present_days = sum(r.count(s) for r in reports for s in PRESENT_STATUSES)
    denominator = len(reports) * len(days)
    ratio = present_days / denominator if denominator else 0.0
    department, department_minutes = top_department(reports)

    summary = ReportSummary(
        employee_count=len(reports),
        days_in_range=len(days),
        total_late_occurrences=sum(r.late_days for r in reports),
        total_late_minutes=sum(r.total_late_minutes for r in reports),
        present_days=present_days,
        attendance_ratio=ratio,
        attendance_rate_pct=round_half_up(ratio * 100),
        unjustified_absences=sum(r.count(DayStatus.UNJUSTIFIED) for r in reports),
        top_late_department=department,
        department_late_minutes=department_minutes,
    )
    return AttendanceReport(start=start, end=end, employees=reports, summary=summary)
