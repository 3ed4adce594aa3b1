from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, full_name, username, password_hash, role, department, device_user_id, is_active"


def _row_to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        username=r["username"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        department=r.get("department"),
        device_user_id=r.get("device_user_id"),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where}=%s", (value,))
            r = fetchone(cur)
            return _row_to_user(r) if r else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id", int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return self._get_one("username", username)

    def get_by_device_user_id(self, device_user_id: str) -> Optional[User]:
        return self._get_one("device_user_id", str(device_user_id))

    def list_employees(self) -> Sequence[User]:
        return self._list_by_role(Role.EMPLOYEE)

    def list_admins(self) -> Sequence[User]:
        return self._list_by_role(Role.ADMIN)

    def _list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM users
                WHERE role=%s AND is_active=1
                ORDER BY user_id
                """,
                (role.value,),
            )
            return [_row_to_user(r) for r in fetchall(cur)]

    def create_user(
        self,
        *,
        full_name: str,
        username: str,
        password_hash: str,
        role: Role,
        department: Optional[str],
        device_user_id: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users (full_name, username, password_hash, role, department, device_user_id)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (full_name, username, password_hash, role.value, department, device_user_id),
            )
            return int(cur.lastrowid)
