from __future__ import annotations

import json
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import ReportSections, SystemSettings
from .repository import SettingsRepository

SETTINGS_ROW_ID = 1


class MySQLSettingsRepository(SettingsRepository):
    """Singleton-row settings table."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load(self) -> Optional[SystemSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_start_time, latest_allowed_time, allowed_lateness_per_month,
                       morning_reminder_enabled, morning_reminder_time,
                       instant_late_notification_enabled, instant_late_message_template,
                       auto_request_reason_enabled, auto_request_message_template,
                       auto_report_day, report_sections, fingerprint_api_url
                FROM system_settings
                WHERE settings_id=%s
                """,
                (SETTINGS_ROW_ID,),
            )
            r = fetchone(cur)
            if not r:
                return None

            sections = json.loads(r.get("report_sections") or "{}")
            return SystemSettings(
                attendance_start_time=normalize_mysql_time(r["attendance_start_time"]),
                latest_allowed_time=normalize_mysql_time(r["latest_allowed_time"]),
                allowed_lateness_per_month=int(r["allowed_lateness_per_month"]),
                morning_reminder_enabled=bool(r["morning_reminder_enabled"]),
                morning_reminder_time=normalize_mysql_time(r["morning_reminder_time"]),
                instant_late_notification_enabled=bool(r["instant_late_notification_enabled"]),
                instant_late_message_template=r["instant_late_message_template"],
                auto_request_reason_enabled=bool(r["auto_request_reason_enabled"]),
                auto_request_message_template=r["auto_request_message_template"],
                auto_report_day=int(r["auto_report_day"]),
                report_sections=ReportSections(
                    **{k: bool(v) for k, v in sections.items() if k in ReportSections.__dataclass_fields__}
                ),
                fingerprint_api_url=r.get("fingerprint_api_url") or "",
            )

    def save(self, settings: SystemSettings) -> None:
        sections = json.dumps(settings.to_dict()["report_sections"])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO system_settings(
                    settings_id, attendance_start_time, latest_allowed_time, allowed_lateness_per_month,
                    morning_reminder_enabled, morning_reminder_time,
                    instant_late_notification_enabled, instant_late_message_template,
                    auto_request_reason_enabled, auto_request_message_template,
                    auto_report_day, report_sections, fingerprint_api_url
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_start_time=VALUES(attendance_start_time),
                    latest_allowed_time=VALUES(latest_allowed_time),
                    allowed_lateness_per_month=VALUES(allowed_lateness_per_month),
                    morning_reminder_enabled=VALUES(morning_reminder_enabled),
                    morning_reminder_time=VALUES(morning_reminder_time),
                    instant_late_notification_enabled=VALUES(instant_late_notification_enabled),
                    instant_late_message_template=VALUES(instant_late_message_template),
                    auto_request_reason_enabled=VALUES(auto_request_reason_enabled),
                    auto_request_message_template=VALUES(auto_request_message_template),
                    auto_report_day=VALUES(auto_report_day),
                    report_sections=VALUES(report_sections),
                    fingerprint_api_url=VALUES(fingerprint_api_url)
                """,
                (
                    SETTINGS_ROW_ID,
                    settings.attendance_start_time,
                    settings.latest_allowed_time,
                    int(settings.allowed_lateness_per_month),
                    int(settings.morning_reminder_enabled),
                    settings.morning_reminder_time,
                    int(settings.instant_late_notification_enabled),
                    settings.instant_late_message_template,
                    int(settings.auto_request_reason_enabled),
                    settings.auto_request_message_template,
                    int(settings.auto_report_day),
                    sections,
                    settings.fingerprint_api_url or None,
                ),
            )
