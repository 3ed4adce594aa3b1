from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import format_hhmm, now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT, MAX_NOTIFICATION_LIMIT, MORNING_REMINDER_TITLE
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..settings.model import SystemSettings
from ..users.repository import UserRepository
from .model import Broadcast, Notification, NotificationTarget, ToEmployees, target_from_ids, targets_user
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


def clamp_limit(limit) -> int:
    try:
        value = int(limit)
    except (TypeError, ValueError):
        return DEFAULT_NOTIFICATION_LIMIT
    return max(1, min(MAX_NOTIFICATION_LIMIT, value))


class NotificationService:
    """Notification sink: every emitted notification is an independent row."""

    def __init__(self, notifications: NotificationRepository, users: UserRepository):
        self._notifications = notifications
        self._users = users

    def emit(self, title: str, message: str, target: NotificationTarget, *, now: datetime | None = None) -> Notification:
        now = now or now_local()
        notification_id = self._notifications.create(title=title, message=message, target=target, created_at=now)
        return Notification(notification_id=notification_id, title=title, message=message, created_at=now, target=target)

    def notify_user(self, user_id: int, title: str, message: str, *, now: datetime | None = None) -> Notification:
        return self.emit(title, message, ToEmployees.of([user_id]), now=now)

    def notify_admins(self, title: str, message: str, *, now: datetime | None = None) -> Optional[Notification]:
        admin_ids = [u.user_id for u in self._users.list_admins()]
        if not admin_ids:
            logger.warning("No administrator to notify: %s", title)
            return None
        return self.emit(title, message, ToEmployees.of(admin_ids), now=now)

    def send(
        self,
        *,
        current_role: Role,
        title: str,
        message: str,
        user_ids: Optional[Iterable[int]] = None,
    ) -> Notification:
        """Admin-authored notification; no ids means broadcast."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")

        title = require_non_empty(title, "Title")
        message = require_non_empty(message, "Message")
        return self.emit(title, message, target_from_ids(user_ids))

    def list_for_user(self, user_id: int, *, limit=DEFAULT_NOTIFICATION_LIMIT) -> Sequence[Notification]:
        return self._notifications.list_for_user(int(user_id), clamp_limit(limit))

    def list_recent(self, reader_id: int, *, limit=DEFAULT_NOTIFICATION_LIMIT) -> Sequence[Notification]:
        """Every notification, newest first, with read flags as seen by ``reader_id``."""
        return self._notifications.list_recent(int(reader_id), clamp_limit(limit))

    def mark_read(self, notification_id: int, *, user_id: int, current_role: Role) -> None:
        notification = self._notifications.get(int(notification_id))
        if not notification:
            raise NotFoundError("Notification not found")
        if current_role != Role.ADMIN and not targets_user(notification.target, user_id):
            raise AuthorizationError("Notification is not addressed to you")
        self._notifications.mark_read(notification.notification_id, int(user_id))

    def exists_today(self, *, title: str, day: date) -> bool:
        return self._notifications.exists_today(title=title, day=day)

    def send_morning_reminder(self, settings: SystemSettings, *, now: datetime | None = None) -> bool:
        """Broadcast today's reminder once the reminder time has passed.

        Returns True only when a notification was created; a second call on the
        same day is a no-op.
        """
        now = now or now_local()
        if not settings.morning_reminder_enabled:
            return False
        if now.time() < settings.morning_reminder_time:
            return False
        if self._notifications.exists_today(title=MORNING_REMINDER_TITLE, day=now.date()):
            return False

        message = f"Reminder: attendance starts at {format_hhmm(settings.attendance_start_time)}"
        self.emit(MORNING_REMINDER_TITLE, message, Broadcast(), now=now)
        logger.info("Morning reminder broadcast for %s", now.date().isoformat())
        return True
