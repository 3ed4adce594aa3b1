from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import Notification, NotificationTarget


class NotificationRepository(Protocol):
    def create(self, *, title: str, message: str, target: NotificationTarget, created_at: datetime) -> int:
        raise NotImplementedError

    def get(self, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, limit: int) -> Sequence[Notification]:
        """Broadcasts plus notifications targeted at ``user_id``, newest first.

        ``is_read`` reflects whether ``user_id`` itself has read each one.
        """

        raise NotImplementedError

    def list_recent(self, reader_id: int, limit: int) -> Sequence[Notification]:
        raise NotImplementedError

    def mark_read(self, notification_id: int, user_id: int) -> None:
        """Record that ``user_id`` read the notification; repeating it is a no-op."""

        raise NotImplementedError

    def exists_today(self, *, title: str, day: date) -> bool:
        """True when a notification with ``title`` was already created on ``day``."""

        raise NotImplementedError
