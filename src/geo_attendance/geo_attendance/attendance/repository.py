from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceSource
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        is_late: bool,
        late_minutes: int,
        source: AttendanceSource,
        location_id: Optional[int] = None,
        excuse_reason: Optional[str] = None,
        mandatory_excuse_reason: Optional[str] = None,
    ) -> int:
        """Insert the day's record.

        Raises DuplicateCheckInError when (user_id, work_date) already exists,
        including when a concurrent insert won the race.
        """

        raise NotImplementedError

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        """Set check-out only if still open; False when it was already set."""

        raise NotImplementedError

    def count_late_in_month(self, user_id: int, *, month_start: date, before: date) -> int:
        """Late records with ``month_start <= work_date < before``."""

        raise NotImplementedError

    def list_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
