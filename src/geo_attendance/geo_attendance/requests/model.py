from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import ClassVar, Optional, Union

from ..core.enums import RequestStatus, RequestType


@dataclass(frozen=True)
class LeaveRequest:
    """Leave covering ``[start_date, start_date + duration_days - 1]``."""

    kind: ClassVar[RequestType] = RequestType.LEAVE

    request_id: int
    user_id: int
    start_date: date
    duration_days: int
    reason: str
    status: RequestStatus
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    admin_note: Optional[str] = None

    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(days=max(1, self.duration_days) - 1)

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "type": self.kind.value,
            "user_id": self.user_id,
            "date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "duration_days": self.duration_days,
            "reason": self.reason,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "admin_note": self.admin_note,
        }


@dataclass(frozen=True)
class ExcuseRequest:
    kind: ClassVar[RequestType] = RequestType.EXCUSE

    request_id: int
    user_id: int
    excuse_date: date
    reason: str
    status: RequestStatus
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    admin_note: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "type": self.kind.value,
            "user_id": self.user_id,
            "date": self.excuse_date.isoformat(),
            "reason": self.reason,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "admin_note": self.admin_note,
        }


Request = Union[LeaveRequest, ExcuseRequest]
