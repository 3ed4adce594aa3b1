from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty, require_positive_int
from ..core.constants import NEW_REQUEST_TITLE, REQUEST_DECIDED_TITLE
from ..core.enums import RequestStatus, RequestType, Role
from ..core.exceptions import (
    AuthorizationError,
    NotFoundError,
    RequestAlreadyDecidedError,
    UpstreamError,
    ValidationError,
)
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from .model import Request
from .repository import RequestRepository

logger = logging.getLogger(__name__)

_STATUS_LABELS = {
    RequestStatus.APPROVED: "approved",
    RequestStatus.REJECTED: "rejected",
}


class RequestService:
    """Leave/excuse workflow: employee submits, an admin decides exactly once."""

    def __init__(self, requests: RequestRepository, users: UserRepository, notifications: NotificationService):
        self._requests = requests
        self._users = users
        self._notifications = notifications

    def _employee_name(self, user_id: int) -> str:
        user = self._users.get_by_id(int(user_id))
        return user.full_name if user else f"Employee #{user_id}"

    def _notify(self, action) -> None:
        # The request row is already committed at this point.
        try:
            action()
        except UpstreamError:
            logger.warning("Request notification could not be delivered", exc_info=True)

    def submit_leave(
        self,
        *,
        current_role: Role,
        user_id: int,
        start_date: date,
        duration_days,
        reason: str,
        now: datetime | None = None,
    ) -> int:
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can submit requests")

        duration = require_positive_int(duration_days, "Duration (days)")
        reason = require_non_empty(reason, "Reason")
        now = now or now_local()

        request_id = self._requests.create_leave(
            user_id=int(user_id),
            start_date=start_date,
            duration_days=duration,
            reason=reason,
            created_at=now,
        )
        logger.info("Leave request %s submitted by user %s (%s, %s days)", request_id, user_id, start_date, duration)
        name = self._employee_name(user_id)
        self._notify(
            lambda: self._notifications.notify_admins(
                NEW_REQUEST_TITLE, f"{name} requested {duration} day(s) of leave from {start_date.isoformat()}", now=now
            )
        )
        return request_id

    def submit_excuse(
        self,
        *,
        current_role: Role,
        user_id: int,
        excuse_date: date,
        reason: str,
        now: datetime | None = None,
    ) -> int:
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can submit requests")

        now = now or now_local()
        if excuse_date > now.date():
            raise ValidationError("Excuse date cannot be in the future")
        reason = require_non_empty(reason, "Reason")

        request_id = self._requests.create_excuse(
            user_id=int(user_id), excuse_date=excuse_date, reason=reason, created_at=now
        )
        logger.info("Excuse request %s submitted by user %s for %s", request_id, user_id, excuse_date)
        name = self._employee_name(user_id)
        self._notify(
            lambda: self._notifications.notify_admins(
                NEW_REQUEST_TITLE, f"{name} submitted an excuse for {excuse_date.isoformat()}", now=now
            )
        )
        return request_id

    def approve(self, *, current_role: Role, admin_user_id: int, kind: RequestType, request_id: int, admin_note: str = "") -> Request:
        return self._decide(current_role, admin_user_id, kind, request_id, RequestStatus.APPROVED, admin_note)

    def reject(self, *, current_role: Role, admin_user_id: int, kind: RequestType, request_id: int, admin_note: str = "") -> Request:
        return self._decide(current_role, admin_user_id, kind, request_id, RequestStatus.REJECTED, admin_note)

    def _decide(
        self,
        current_role: Role,
        admin_user_id: int,
        kind: RequestType,
        request_id: int,
        status: RequestStatus,
        admin_note: str,
    ) -> Request:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")

        req = self._requests.get(kind, int(request_id))
        if not req:
            raise NotFoundError("Request not found")
        if req.status != RequestStatus.PENDING:
            raise RequestAlreadyDecidedError("Request has already been decided")

        now = now_local()
        decided = self._requests.decide(
            kind=kind,
            request_id=int(request_id),
            status=status,
            decided_by=int(admin_user_id),
            decided_at=now,
            admin_note=optional_text(admin_note),
        )
        if not decided:
            raise RequestAlreadyDecidedError("Request has already been decided")

        logger.info("%s request %s %s by admin %s", kind.value, request_id, status.value, admin_user_id)
        label = _STATUS_LABELS[status]
        self._notify(
            lambda: self._notifications.notify_user(
                req.user_id, REQUEST_DECIDED_TITLE, f"Your {kind.value} request was {label}", now=now
            )
        )
        return self._requests.get(kind, int(request_id)) or req

    def list_for_user(self, user_id: int) -> Sequence[Request]:
        return self._requests.list_for_user(int(user_id))

    def list_pending(self, *, current_role: Role) -> Sequence[Request]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")
        return self._requests.list_pending()

    def list_in_range(self, *, start_date: date, end_date: date, user_ids: Optional[Sequence[int]] = None) -> Sequence[Request]:
        return self._requests.list_in_range(start_date=start_date, end_date=end_date, user_ids=user_ids)
