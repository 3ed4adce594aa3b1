from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.errors import register_error_handlers
from .common.http import ok
from .database.bootstrap import DEFAULT_SCHEMA_PATH, apply_schema, ensure_demo_users, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .device.controller import register as register_device
from .locations.controller import register as register_locations
from .notifications.controller import register as register_notifications
from .reports.controller import register as register_reports
from .requests.controller import register as register_requests
from .settings.controller import register as register_settings
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def register_cli(app: Flask, container: Container, db_config: dict | None) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Apply database/schema.sql and create the demo accounts."""
        if db_config is None:
            raise RuntimeError("No database configured")
        apply_schema(db_config, schema_path=DEFAULT_SCHEMA_PATH)
        ensure_demo_users(db_config)
        print(f"schema ready (tables={len(list_tables(db_config))})")

    @app.cli.command("send-morning-reminder")
    def send_morning_reminder():
        """Broadcast today's attendance reminder (no-op if already sent)."""
        sent = container.notification_service.send_morning_reminder(container.settings_service.current())
        print("reminder sent" if sent else "nothing to send")

    @app.cli.command("monthly-report")
    def monthly_report():
        """Generate last month's report when today is the configured report day."""
        ran = container.report_service.run_scheduled_monthly_report()
        print("monthly report generated" if ran else "not the report day, or already generated")


def create_app(container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DEVICE_CONNECTOR_TOKEN"] = getattr(settings, "DEVICE_CONNECTOR_TOKEN", "")
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    db_config = None
    if container is None:
        db_config = dict(getattr(settings, "DB_CONFIG"))
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DEFAULT_SCHEMA_PATH)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)

        container = build_container(
            db_config=db_config,
            fingerprint_timeout=float(getattr(settings, "FINGERPRINT_TIMEOUT_SECONDS", 10)),
        )

    container.settings_service.load(defaults=getattr(settings, "ATTENDANCE_DEFAULTS", None))
    app.extensions["geo_attendance"] = container

    register_error_handlers(app)

    @app.route("/api/health", endpoint="health")
    def health():
        return ok({"ok": True})

    register_users(app, container)
    register_locations(app, container)
    register_attendance(app, container)
    register_requests(app, container)
    register_notifications(app, container)
    register_reports(app, container)
    register_settings(app, container)
    register_device(app, container)
    register_cli(app, container, db_config)

    return app
