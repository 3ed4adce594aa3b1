import pytest
import requests

from fakes import InMemoryUsers, make_user
from src.geo_attendance.geo_attendance.core.enums import Role
from src.geo_attendance.geo_attendance.core.exceptions import AuthorizationError, UpstreamError, ValidationError
from src.geo_attendance.geo_attendance.device.client import FingerprintApiClient
from src.geo_attendance.geo_attendance.device.sync_service import FingerprintSyncService
from src.geo_attendance.geo_attendance.settings.store import SettingsStore


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text or str(payload)

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


EMPLOYEES = {
    "data": [
        {"emp_code": "1001", "first_name": "Sara", "last_name": "Ali", "department": {"dept_name": "Sales"}},
        {"emp_code": "1002", "first_name": "Omar", "department": None},
        {"first_name": "No code"},
    ]
}


def _sync_service(session, users=None):
    client = FingerprintApiClient(timeout=1.0, session=session)
    return FingerprintSyncService(client, users or InMemoryUsers([make_user(1, role=Role.ADMIN)]), SettingsStore())


def test_connection_preview_is_truncated():
    session = FakeSession(FakeResponse(200, text="x" * 500))
    client = FingerprintApiClient(session=session)

    result = client.test_connection("http://device.local/api", username="u", password="p")

    assert result == {"ok": True, "status": 200, "preview": "x" * 200}
    assert session.calls[0][1]["auth"] == ("u", "p")


def test_network_failure_is_an_upstream_error():
    client = FingerprintApiClient(session=FakeSession(error=requests.ConnectionError("refused")))

    with pytest.raises(UpstreamError):
        client.test_connection("http://device.local/api")


def test_fetch_employees_reads_personnel_endpoint():
    session = FakeSession(FakeResponse(200, EMPLOYEES))

    employees = FingerprintApiClient(session=session).fetch_employees(
        "http://device.local/api", username="u", password="p"
    )

    assert session.calls[0][0] == "http://device.local/api/employees/"
    assert [e.device_user_id for e in employees] == ["1001", "1002"]
    assert employees[0].full_name == "Sara Ali"
    assert employees[0].department == "Sales"
    assert employees[1].department is None


def test_fetch_employees_http_error():
    client = FingerprintApiClient(session=FakeSession(FakeResponse(401, text="denied")))

    with pytest.raises(UpstreamError):
        client.fetch_employees("http://device.local/api", username="u", password="p")


def test_sync_creates_device_linked_accounts_once():
    users = InMemoryUsers([make_user(1, role=Role.ADMIN)])
    service = _sync_service(FakeSession(FakeResponse(200, EMPLOYEES)), users)

    first = service.sync_employees(current_role=Role.ADMIN, url="http://device.local/api", username="u", password="p")
    second = service.sync_employees(current_role=Role.ADMIN, url="http://device.local/api", username="u", password="p")

    assert first == {"fetched": 2, "created": 2, "already_linked": 0, "skipped": 0}
    assert second == {"fetched": 2, "created": 0, "already_linked": 2, "skipped": 0}
    created = users.get_by_device_user_id("1001")
    assert created.username == "emp1001"
    assert created.role == Role.EMPLOYEE


def test_sync_requires_credentials_and_admin():
    service = _sync_service(FakeSession(FakeResponse(200, EMPLOYEES)))

    with pytest.raises(ValidationError):
        service.sync_employees(current_role=Role.ADMIN, url="http://device.local/api", username="", password="")
    with pytest.raises(AuthorizationError):
        service.sync_employees(current_role=Role.EMPLOYEE, url="http://device.local/api", username="u", password="p")


def test_sync_needs_a_url():
    service = _sync_service(FakeSession(FakeResponse(200, EMPLOYEES)))

    with pytest.raises(ValidationError):
        service.test_connection(current_role=Role.ADMIN, url="")
