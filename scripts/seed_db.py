from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.geo_attendance.geo_attendance.database.bootstrap import ensure_demo_users
from src.geo_attendance.geo_attendance.database.connection import DBConfig, DatabaseConnection
from src.geo_attendance.geo_attendance.locations.mysql_location_repository import MySQLLocationRepository

DEMO_SITE = {"name": "Head Office", "latitude": 24.7136, "longitude": 46.6753, "radius_m": 500}


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_users(db_config)

    locations = MySQLLocationRepository(DatabaseConnection(DBConfig.from_dict(db_config)))
    if not locations.list_all():
        locations.create(**DEMO_SITE)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
