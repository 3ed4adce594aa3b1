from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, split_csv_ids
from .model import Broadcast, Notification, NotificationTarget, ToEmployees
from .repository import NotificationRepository

_COLUMNS = "n.notification_id, n.title, n.message, n.target_user_ids, n.created_at"


def _target_to_csv(target: NotificationTarget) -> Optional[str]:
    if isinstance(target, ToEmployees):
        return ",".join(str(u) for u in sorted(target.user_ids))
    return None


def _row_to_notification(r: dict) -> Notification:
    ids = split_csv_ids(r.get("target_user_ids"))
    return Notification(
        notification_id=int(r["notification_id"]),
        title=r["title"],
        message=r["message"],
        created_at=r["created_at"],
        target=ToEmployees.of(ids) if ids else Broadcast(),
        is_read=bool(r.get("is_read")),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, title: str, message: str, target: NotificationTarget, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications (title, message, target_user_ids, created_at)
                VALUES (%s, %s, %s, %s)
                """,
                (title, message, _target_to_csv(target), created_at),
            )
            return int(cur.lastrowid)

    def get(self, notification_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM notifications n WHERE n.notification_id=%s", (int(notification_id),))
            r = fetchone(cur)
            return _row_to_notification(r) if r else None

    def list_for_user(self, user_id: int, limit: int) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, r.user_id IS NOT NULL AS is_read
                FROM notifications n
                LEFT JOIN notification_reads r
                  ON r.notification_id = n.notification_id AND r.user_id = %s
                WHERE n.target_user_ids IS NULL
                   OR FIND_IN_SET(%s, REPLACE(n.target_user_ids, ' ', ''))
                ORDER BY n.created_at DESC, n.notification_id DESC
                LIMIT %s
                """,
                (int(user_id), str(int(user_id)), int(limit)),
            )
            return [_row_to_notification(r) for r in fetchall(cur)]

    def list_recent(self, reader_id: int, limit: int) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, r.user_id IS NOT NULL AS is_read
                FROM notifications n
                LEFT JOIN notification_reads r
                  ON r.notification_id = n.notification_id AND r.user_id = %s
                ORDER BY n.created_at DESC, n.notification_id DESC
                LIMIT %s
                """,
                (int(reader_id), int(limit)),
            )
            return [_row_to_notification(r) for r in fetchall(cur)]

    def mark_read(self, notification_id: int, user_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notification_reads (notification_id, user_id, read_at)
                VALUES (%s, %s, NOW())
                ON DUPLICATE KEY UPDATE read_at = read_at
                """,
                (int(notification_id), int(user_id)),
            )

    def exists_today(self, *, title: str, day: date) -> bool:
        start = datetime.combine(day, datetime.min.time())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM notifications
                WHERE title=%s AND created_at >= %s AND created_at < %s
                LIMIT 1
                """,
                (title, start, start + timedelta(days=1)),
            )
            return fetchone(cur) is not None
