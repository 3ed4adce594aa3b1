from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceSource, AttendanceState


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime]
    is_late: bool
    late_minutes: int
    source: AttendanceSource
    location_id: Optional[int] = None
    excuse_reason: Optional[str] = None
    mandatory_excuse_reason: Optional[str] = None

    @property
    def state(self) -> AttendanceState:
        if self.check_out_time is None:
            return AttendanceState.CHECKED_IN
        return AttendanceState.CHECKED_OUT

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "user_id": self.user_id,
            "date": self.work_date.isoformat(),
            "check_in": self.check_in_time.isoformat(),
            "check_out": self.check_out_time.isoformat() if self.check_out_time else None,
            "is_late": self.is_late,
            "late_minutes": self.late_minutes,
            "excuse_reason": self.excuse_reason,
            "mandatory_excuse_reason": self.mandatory_excuse_reason,
            "location_id": self.location_id,
            "source": self.source.value,
        }


def state_of(record: Optional[AttendanceRecord]) -> AttendanceState:
    return record.state if record else AttendanceState.NOT_CHECKED_IN
