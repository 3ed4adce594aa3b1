from __future__ import annotations

import logging
import secrets

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..settings.store import SettingsStore
from ..users.repository import UserRepository
from .client import FingerprintApiClient

logger = logging.getLogger(__name__)


class FingerprintSyncService:
    """Admin use case: test the fingerprint API and import its employee list once.

    Credentials only live for the duration of a call.
    """

    def __init__(self, client: FingerprintApiClient, users: UserRepository, settings: SettingsStore):
        self._client = client
        self._users = users
        self._settings = settings

    def _url(self, url: str | None) -> str:
        resolved = (url or "").strip() or self._settings.get().fingerprint_api_url
        if not resolved:
            raise ValidationError("Fingerprint API URL is required")
        return resolved

    def test_connection(self, *, current_role: Role, url: str | None, username: str = "", password: str = "") -> dict:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")
        return self._client.test_connection(self._url(url), username=username, password=password)

    def sync_employees(self, *, current_role: Role, url: str | None, username: str, password: str) -> dict:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")
        if not username or not password:
            raise ValidationError("Username and password are required for the initial sync")

        remote = self._client.fetch_employees(self._url(url), username=username, password=password)
        created = 0
        linked = 0
        skipped = 0

        for emp in remote:
            if self._users.get_by_device_user_id(emp.device_user_id):
                linked += 1
                continue

            username_local = f"emp{emp.device_user_id}"
            if self._users.get_by_username(username_local):
                skipped += 1
                continue

            # device-only account: random password nobody knows
            self._users.create_user(
                full_name=emp.full_name,
                username=username_local,
                password_hash=generate_password_hash(secrets.token_urlsafe(16)),
                role=Role.EMPLOYEE,
                department=emp.department,
                device_user_id=emp.device_user_id,
            )
            created += 1

        logger.info("Fingerprint sync: fetched=%s created=%s linked=%s skipped=%s", len(remote), created, linked, skipped)
        return {"fetched": len(remote), "created": created, "already_linked": linked, "skipped": skipped}
