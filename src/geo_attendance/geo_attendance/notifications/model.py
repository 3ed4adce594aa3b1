from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Iterable, Optional, Union


@dataclass(frozen=True)
class Broadcast:
    """Visible to every user."""


@dataclass(frozen=True)
class ToEmployees:
    user_ids: FrozenSet[int]

    @classmethod
    def of(cls, user_ids: Iterable[int]) -> "ToEmployees":
        return cls(frozenset(int(u) for u in user_ids))


NotificationTarget = Union[Broadcast, ToEmployees]


def targets_user(target: NotificationTarget, user_id: int) -> bool:
    if isinstance(target, Broadcast):
        return True
    return int(user_id) in target.user_ids


def target_from_ids(user_ids: Optional[Iterable[int]]) -> NotificationTarget:
    """Empty or missing id list means broadcast."""
    ids = list(user_ids or [])
    return ToEmployees.of(ids) if ids else Broadcast()


@dataclass(frozen=True)
class Notification:
    notification_id: int
    title: str
    message: str
    created_at: datetime
    target: NotificationTarget
    is_read: bool = False

    def to_dict(self) -> dict:
        data = {
            "id": self.notification_id,
            "title": self.title,
            "message": self.message,
            "timestamp": self.created_at.isoformat(),
            "read": self.is_read,
        }
        if isinstance(self.target, ToEmployees):
            data["target_user_ids"] = sorted(self.target.user_ids)
        return data
