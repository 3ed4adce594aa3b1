from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import SystemSettings, settings_from_dict
from .repository import SettingsRepository
from .store import SettingsStore

logger = logging.getLogger(__name__)


def validate_settings(settings: SystemSettings) -> SystemSettings:
    if settings.latest_allowed_time < settings.attendance_start_time:
        raise ValidationError("Latest allowed time cannot be before the attendance start time")
    if int(settings.allowed_lateness_per_month) < 1:
        raise ValidationError("Allowed lateness per month must be at least 1")
    if not 1 <= int(settings.auto_report_day) <= 28:
        raise ValidationError("Report day must be between 1 and 28")
    if not settings.instant_late_message_template.strip():
        raise ValidationError("Instant lateness message template is required")
    if not settings.auto_request_message_template.strip():
        raise ValidationError("Auto request message template is required")
    return settings


class SettingsService:
    """Use case: load settings at startup, let admins replace them."""

    def __init__(self, store: SettingsStore, settings_repo: Optional[SettingsRepository] = None):
        self._store = store
        self._repo = settings_repo

    def current(self) -> SystemSettings:
        return self._store.get()

    def load(self, *, defaults: Optional[dict] = None) -> SystemSettings:
        persisted = self._repo.load() if self._repo else None
        if persisted is None:
            persisted = validate_settings(settings_from_dict(defaults or {}))
            logger.info("No persisted settings found, using defaults")
        return self._store.replace(persisted)

    def update(self, *, current_role: Role, changes: dict) -> SystemSettings:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")

        def apply(current: SystemSettings) -> SystemSettings:
            try:
                candidate = settings_from_dict(changes, base=current)
            except (TypeError, ValueError) as e:
                raise ValidationError(f"Invalid settings: {e}")
            validate_settings(candidate)
            if self._repo:
                self._repo.save(candidate)
            return candidate

        candidate = self._store.update(apply)
        logger.info("System settings updated (%s)", ", ".join(sorted(changes)))
        return candidate
