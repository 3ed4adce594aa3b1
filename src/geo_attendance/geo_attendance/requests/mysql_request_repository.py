from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus, RequestType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ExcuseRequest, LeaveRequest, Request
from .repository import RequestRepository

_TABLES = {
    RequestType.LEAVE: "leave_requests",
    RequestType.EXCUSE: "excuse_requests",
}

_LEAVE_COLUMNS = "request_id, user_id, start_date, duration_days, reason, status, created_at, decided_by, decided_at, admin_note"
_EXCUSE_COLUMNS = "request_id, user_id, excuse_date, reason, status, created_at, decided_by, decided_at, admin_note"


def _row_to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        start_date=r["start_date"],
        duration_days=int(r.get("duration_days") or 1),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        admin_note=r.get("admin_note"),
    )


def _row_to_excuse(r: dict) -> ExcuseRequest:
    return ExcuseRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        excuse_date=r["excuse_date"],
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        admin_note=r.get("admin_note"),
    )


def _user_filter(user_ids: Optional[Sequence[int]]) -> tuple[str, list]:
    if user_ids is None:
        return "", []
    return f" AND user_id IN ({', '.join(['%s'] * len(user_ids))})", [int(u) for u in user_ids]


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Create --------
    def create_leave(
        self,
        *,
        user_id: int,
        start_date: date,
        duration_days: int,
        reason: str,
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, start_date, duration_days, reason, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), start_date, int(duration_days), reason, RequestStatus.PENDING.value, created_at),
            )
            return int(cur.lastrowid)

    def create_excuse(self, *, user_id: int, excuse_date: date, reason: str, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO excuse_requests(user_id, excuse_date, reason, status, created_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), excuse_date, reason, RequestStatus.PENDING.value, created_at),
            )
            return int(cur.lastrowid)

    # -------- Read --------
    def get(self, kind: RequestType, request_id: int) -> Optional[Request]:
        columns = _LEAVE_COLUMNS if kind == RequestType.LEAVE else _EXCUSE_COLUMNS
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {columns} FROM {_TABLES[kind]} WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            if not r:
                return None
            return _row_to_leave(r) if kind == RequestType.LEAVE else _row_to_excuse(r)

    def list_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[Request]:
        if user_ids is not None and not user_ids:
            return []
        user_sql, user_params = _user_filter(user_ids)

        with db_cursor(self._conn_factory) as (_, cur):
            # Overlap test: start <= range_end AND start + duration - 1 >= range_start
            cur.execute(
                f"""
                SELECT {_LEAVE_COLUMNS}
                FROM leave_requests
                WHERE start_date <= %s
                  AND DATE_ADD(start_date, INTERVAL GREATEST(duration_days, 1) - 1 DAY) >= %s
                  {user_sql}
                ORDER BY start_date, request_id
                """,
                tuple([end_date, start_date] + user_params),
            )
            leaves: list[Request] = [_row_to_leave(r) for r in fetchall(cur)]

            cur.execute(
                f"""
                SELECT {_EXCUSE_COLUMNS}
                FROM excuse_requests
                WHERE excuse_date BETWEEN %s AND %s
                  {user_sql}
                ORDER BY excuse_date, request_id
                """,
                tuple([start_date, end_date] + user_params),
            )
            excuses: list[Request] = [_row_to_excuse(r) for r in fetchall(cur)]

        return leaves + excuses

    def list_for_user(self, user_id: int, *, limit: int = 200) -> Sequence[Request]:
        return self._list(where="user_id=%s", params=(int(user_id),), limit=limit)

    def list_pending(self, *, limit: int = 500) -> Sequence[Request]:
        return self._list(where="status=%s", params=(RequestStatus.PENDING.value,), limit=limit)

    def _list(self, *, where: str, params: tuple, limit: int) -> Sequence[Request]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_LEAVE_COLUMNS} FROM leave_requests WHERE {where} ORDER BY created_at DESC LIMIT %s",
                params + (int(limit),),
            )
            items: list[Request] = [_row_to_leave(r) for r in fetchall(cur)]
            cur.execute(
                f"SELECT {_EXCUSE_COLUMNS} FROM excuse_requests WHERE {where} ORDER BY created_at DESC LIMIT %s",
                params + (int(limit),),
            )
            items.extend(_row_to_excuse(r) for r in fetchall(cur))

        items.sort(key=lambda req: (req.created_at, req.request_id), reverse=True)
        return items[: int(limit)]

    # -------- Decide --------
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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE {_TABLES[kind]}
                SET status=%s, decided_by=%s, decided_at=%s, admin_note=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    decided_at,
                    admin_note,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
