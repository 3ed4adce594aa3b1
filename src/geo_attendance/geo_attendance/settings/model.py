from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from datetime import time

from ..common.datetime_utils import format_hhmm, parse_hhmm
from ..core.constants import AUTO_REQUEST_PLACEHOLDER, INSTANT_LATE_PLACEHOLDER


@dataclass(frozen=True)
class ReportSections:
    """Which optional sections the monthly report includes."""

    late_list: bool = True
    total_late_hours: bool = True
    unexcused_absences: bool = True
    leave_and_excuse_summary: bool = True
    department_comparison: bool = True


@dataclass(frozen=True)
class SystemSettings:
    """Process-wide attendance configuration.

    Immutable: an update produces a new instance (see ``SettingsStore``).
    Fingerprint credentials are deliberately absent; they are only ever passed
    to a single sync call.
    """

    attendance_start_time: time = time(8, 0)
    latest_allowed_time: time = time(8, 15)
    allowed_lateness_per_month: int = 3

    morning_reminder_enabled: bool = True
    morning_reminder_time: time = time(7, 50)
    instant_late_notification_enabled: bool = True
    instant_late_message_template: str = f"You are late! The latest allowed arrival time was {INSTANT_LATE_PLACEHOLDER}"
    auto_request_reason_enabled: bool = True
    auto_request_message_template: str = (
        f"You have been late {AUTO_REQUEST_PLACEHOLDER} times this month. Please provide a reason."
    )

    auto_report_day: int = 25
    report_sections: ReportSections = field(default_factory=ReportSections)

    fingerprint_api_url: str = ""

    def with_changes(self, **changes) -> "SystemSettings":
        return replace(self, **changes)

    def instant_late_message(self) -> str:
        return self.instant_late_message_template.replace(
            INSTANT_LATE_PLACEHOLDER, format_hhmm(self.latest_allowed_time)
        )

    def auto_request_message(self, late_count: int) -> str:
        return self.auto_request_message_template.replace(AUTO_REQUEST_PLACEHOLDER, str(late_count))

    def to_dict(self) -> dict:
        data = asdict(self)
        for key in ("attendance_start_time", "latest_allowed_time", "morning_reminder_time"):
            data[key] = format_hhmm(getattr(self, key))
        return data


TIME_FIELDS = ("attendance_start_time", "latest_allowed_time", "morning_reminder_time")
INT_FIELDS = ("allowed_lateness_per_month", "auto_report_day")
BOOL_FIELDS = ("morning_reminder_enabled", "instant_late_notification_enabled", "auto_request_reason_enabled")


def _coerce(key: str, value):
    if key in TIME_FIELDS:
        return value if isinstance(value, time) else parse_hhmm(str(value))
    if key in INT_FIELDS:
        if isinstance(value, bool):
            raise ValueError(f"{key} must be an integer")
        return int(value)
    if key in BOOL_FIELDS:
        return bool(value)
    return "" if value is None else str(value)


def settings_from_dict(data: dict, *, base: SystemSettings | None = None) -> SystemSettings:
    """Build settings from a (possibly partial) plain dict of primitives.

    Unknown keys are ignored; missing keys keep the value from ``base``.
    """

    base = base or SystemSettings()
    known = set(SystemSettings.__dataclass_fields__)
    changes: dict = {}

    for key, value in data.items():
        if key not in known or key == "report_sections":
            continue
        changes[key] = _coerce(key, value)

    sections = data.get("report_sections")
    if isinstance(sections, dict):
        known_sections = set(ReportSections.__dataclass_fields__)
        changes["report_sections"] = replace(
            base.report_sections, **{k: bool(v) for k, v in sections.items() if k in known_sections}
        )

    return replace(base, **changes)
