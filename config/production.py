import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "geo_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

ATTENDANCE_DEFAULTS = {
    "attendance_start_time": os.getenv("ATTENDANCE_START_TIME", "08:00"),
    "latest_allowed_time": os.getenv("LATEST_ALLOWED_TIME", "08:15"),
    "allowed_lateness_per_month": int(os.getenv("ALLOWED_LATENESS_PER_MONTH", "3")),
    "fingerprint_api_url": os.getenv("FINGERPRINT_API_URL", ""),
}

FINGERPRINT_TIMEOUT_SECONDS = float(os.getenv("FINGERPRINT_TIMEOUT_SECONDS", "10"))
DEVICE_CONNECTOR_TOKEN = os.getenv("DEVICE_CONNECTOR_TOKEN", "")
