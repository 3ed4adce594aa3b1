from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import DayStatus


@dataclass(frozen=True)
class DayDetail:
    day: date
    status: DayStatus
    late_minutes: int = 0

    def to_dict(self) -> dict:
        return {"date": self.day.isoformat(), "status": self.status.value, "late_minutes": self.late_minutes}


@dataclass(frozen=True)
class EmployeeReport:
    user_id: int
    full_name: str
    department: str
    late_days: int
    total_late_minutes: int
    average_late_minutes: float
    days: list[DayDetail] = field(default_factory=list)
    status_counts: dict[DayStatus, int] = field(default_factory=dict)

    @property
    def late_hours(self) -> float:
        return self.total_late_minutes / 60

    @property
    def late_hours_label(self) -> str:
        return f"{self.late_hours:.2f}"

    def count(self, status: DayStatus) -> int:
        return self.status_counts.get(status, 0)

    def to_dict(self, *, with_days: bool = True) -> dict:
        data = {
            "user_id": self.user_id,
            "name": self.full_name,
            "department": self.department,
            "late_days": self.late_days,
            "total_late_minutes": self.total_late_minutes,
            "late_hours": self.late_hours_label,
            "average_late_minutes": self.average_late_minutes,
            "status_counts": {s.value: self.count(s) for s in DayStatus},
        }
        if with_days:
            data["days"] = [d.to_dict() for d in self.days]
        return data


@dataclass(frozen=True)
class ReportSummary:
    employee_count: int
    days_in_range: int
    total_late_occurrences: int
    total_late_minutes: int
    present_days: int
    attendance_ratio: float
    attendance_rate_pct: int
    unjustified_absences: int
    top_late_department: Optional[str]
    department_late_minutes: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "employee_count": self.employee_count,
            "days_in_range": self.days_in_range,
            "total_late_occurrences": self.total_late_occurrences,
            "present_days": self.present_days,
            "attendance_ratio": self.attendance_ratio,
            "attendance_rate_pct": self.attendance_rate_pct,
            "unjustified_absences": self.unjustified_absences,
            "top_late_department": self.top_late_department,
        }


@dataclass(frozen=True)
class AttendanceReport:
    start: date
    end: date
    employees: list[EmployeeReport]
    summary: ReportSummary

    @property
    def late_employees(self) -> list[EmployeeReport]:
        return [e for e in self.employees if e.late_days > 0]
