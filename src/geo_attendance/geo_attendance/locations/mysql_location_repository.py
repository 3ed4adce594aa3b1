from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ApprovedLocation
from .repository import LocationRepository


def _row_to_location(r: dict) -> ApprovedLocation:
    return ApprovedLocation(
        location_id=int(r["location_id"]),
        name=r["name"],
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        radius_m=int(r["radius_m"]),
    )


class MySQLLocationRepository(LocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[ApprovedLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT location_id, name, latitude, longitude, radius_m
                FROM approved_locations
                ORDER BY location_id ASC
                """
            )
            return [_row_to_location(r) for r in fetchall(cur)]

    def get_by_id(self, location_id: int) -> Optional[ApprovedLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT location_id, name, latitude, longitude, radius_m
                FROM approved_locations
                WHERE location_id=%s
                """,
                (int(location_id),),
            )
            r = fetchone(cur)
            return _row_to_location(r) if r else None

    def create(self, *, name: str, latitude: float, longitude: float, radius_m: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO approved_locations(name, latitude, longitude, radius_m)
                VALUES(%s,%s,%s,%s)
                """,
                (name, latitude, longitude, int(radius_m)),
            )
            return int(cur.lastrowid)

    def update(self, *, location_id: int, name: str, latitude: float, longitude: float, radius_m: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE approved_locations
                SET name=%s, latitude=%s, longitude=%s, radius_m=%s
                WHERE location_id=%s
                """,
                (name, latitude, longitude, int(radius_m), int(location_id)),
            )
            return cur.rowcount > 0

    def delete(self, location_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM approved_locations WHERE location_id=%s", (int(location_id),))
            return cur.rowcount > 0
