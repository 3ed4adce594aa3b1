import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "geo_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

ATTENDANCE_DEFAULTS = {
    "attendance_start_time": "08:00",
    "latest_allowed_time": "08:15",
    "allowed_lateness_per_month": 3,
}

FINGERPRINT_TIMEOUT_SECONDS = 2.0
DEVICE_CONNECTOR_TOKEN = "test-connector-token"
