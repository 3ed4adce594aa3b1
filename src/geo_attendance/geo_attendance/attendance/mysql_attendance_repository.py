from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceSource
from ..core.exceptions import DuplicateCheckInError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """attendance_id, user_id, work_date, check_in_time, check_out_time, is_late, late_minutes,
                excuse_reason, mandatory_excuse_reason, location_id, source"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        is_late=bool(r["is_late"]),
        late_minutes=int(r.get("late_minutes") or 0),
        source=AttendanceSource(r["source"]),
        location_id=int(r["location_id"]) if r.get("location_id") is not None else None,
        excuse_reason=r.get("excuse_reason"),
        mandatory_excuse_reason=r.get("mandatory_excuse_reason"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (user_id, int(limit)),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                """,
                (user_id, work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        user_id, work_date, check_in_time, is_late, late_minutes,
                        excuse_reason, mandatory_excuse_reason, location_id, source
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        user_id,
                        work_date,
                        check_in_time,
                        1 if is_late else 0,
                        int(late_minutes),
                        excuse_reason,
                        mandatory_excuse_reason,
                        location_id,
                        source.value,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateCheckInError("Already checked in today") from e
            raise

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, int(attendance_id)),
            )
            return cur.rowcount > 0

    def count_late_in_month(self, user_id: int, *, month_start: date, before: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS late_count
                FROM attendance_records
                WHERE user_id=%s AND is_late=1 AND work_date >= %s AND work_date < %s
                """,
                (user_id, month_start, before),
            )
            r = fetchone(cur)
            return int(r["late_count"]) if r else 0

    def list_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        where = ["work_date BETWEEN %s AND %s"]
        params: list = [start_date, end_date]

        if user_ids is not None:
            if not user_ids:
                return []
            where.append(f"user_id IN ({', '.join(['%s'] * len(user_ids))})")
            params.extend(int(u) for u in user_ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {' AND '.join(where)}
                ORDER BY work_date, user_id
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
