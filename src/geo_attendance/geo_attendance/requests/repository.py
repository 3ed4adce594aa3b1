from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus, RequestType
from .model import Request


class RequestRepository(Protocol):
    def create_leave(
        self,
        *,
        user_id: int,
        start_date: date,
        duration_days: int,
        reason: str,
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def create_excuse(self, *, user_id: int, excuse_date: date, reason: str, created_at: datetime) -> int:
        raise NotImplementedError

    def get(self, kind: RequestType, request_id: int) -> Optional[Request]:
        raise NotImplementedError

    def decide(
        self,
        *,
        kind: RequestType,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        admin_note: Optional[str] = None,
    ) -> bool:
        """Move a PENDING request to ``status``; False when it was not pending."""

        raise NotImplementedError

    def list_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[Request]:
        """Leaves overlapping the range plus excuses dated inside it."""

        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: int = 200) -> Sequence[Request]:
        raise NotImplementedError

    def list_pending(self, *, limit: int = 500) -> Sequence[Request]:
        raise NotImplementedError
