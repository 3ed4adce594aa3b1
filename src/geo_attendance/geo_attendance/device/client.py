from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin

import requests

from ..core.exceptions import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 200


@dataclass(frozen=True)
class RemoteEmployee:
    device_user_id: str
    full_name: str
    department: Optional[str] = None


def _remote_employee(item: dict) -> Optional[RemoteEmployee]:
    code = item.get("emp_code") or item.get("id")
    if code in (None, ""):
        return None

    name = " ".join(part for part in (item.get("first_name"), item.get("last_name")) if part).strip()
    dept = item.get("department")
    if isinstance(dept, dict):
        dept = dept.get("dept_name")
    return RemoteEmployee(
        device_user_id=str(code).strip(),
        full_name=name or f"Employee {code}",
        department=(str(dept).strip() or None) if dept else None,
    )


class FingerprintApiClient:
    """HTTP client for the fingerprint system's personnel API.

    Credentials are passed per call and never kept on the instance.
    """

    def __init__(self, *, timeout: float = 10.0, session: requests.Session | None = None):
        self._timeout = timeout
        self._session = session or requests.Session()

    def _get(self, url: str, username: str, password: str) -> requests.Response:
        if not (url or "").strip():
            raise ValidationError("Fingerprint API URL is required")
        auth = (username, password) if username and password else None
        try:
            return self._session.get(
                url.strip(), auth=auth, headers={"Accept": "application/json"}, timeout=self._timeout
            )
        except requests.RequestException as e:
            logger.warning("Fingerprint API %s unreachable: %s", url, e)
            raise UpstreamError("Fingerprint API unavailable") from e

    def test_connection(self, url: str, *, username: str = "", password: str = "") -> dict:
        resp = self._get(url, username, password)
        return {"ok": resp.ok, "status": resp.status_code, "preview": resp.text[:PREVIEW_CHARS]}

    def fetch_employees(self, url: str, *, username: str, password: str) -> list[RemoteEmployee]:
        base = (url or "").strip()
        if not base:
            raise ValidationError("Fingerprint API URL is required")
        resp = self._get(urljoin(base if base.endswith("/") else base + "/", "employees/"), username, password)
        if not resp.ok:
            raise UpstreamError(f"Fingerprint API error {resp.status_code}")

        try:
            body = resp.json()
        except ValueError as e:
            raise UpstreamError("Fingerprint API returned invalid JSON") from e

        items = body.get("data", []) if isinstance(body, dict) else body
        employees = []
        for item in items or []:
            if isinstance(item, dict):
                emp = _remote_employee(item)
                if emp:
                    employees.append(emp)
        return employees
