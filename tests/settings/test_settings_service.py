from datetime import time

import pytest

from fakes import InMemorySettingsRepo
from src.geo_attendance.geo_attendance.core.enums import Role
from src.geo_attendance.geo_attendance.core.exceptions import AuthorizationError, ValidationError
from src.geo_attendance.geo_attendance.settings.model import SystemSettings, settings_from_dict
from src.geo_attendance.geo_attendance.settings.service import SettingsService
from src.geo_attendance.geo_attendance.settings.store import SettingsStore


@pytest.fixture
def repo():
    return InMemorySettingsRepo()


@pytest.fixture
def service(repo):
    svc = SettingsService(SettingsStore(), repo)
    svc.load(defaults={"latest_allowed_time": "08:30"})
    return svc


def test_defaults_apply_when_nothing_is_persisted(service):
    assert service.current().latest_allowed_time == time(8, 30)
    assert service.current().allowed_lateness_per_month == 3


def test_persisted_settings_win_over_defaults(repo):
    repo.save(SystemSettings(allowed_lateness_per_month=5))
    svc = SettingsService(SettingsStore(), repo)

    loaded = svc.load(defaults={"allowed_lateness_per_month": 2})

    assert loaded.allowed_lateness_per_month == 5


def test_update_persists_and_swaps_snapshot(service, repo):
    before = service.current()

    updated = service.update(
        current_role=Role.ADMIN,
        changes={"allowed_lateness_per_month": "4", "instant_late_message_template": "Late after [time]"},
    )

    assert updated.allowed_lateness_per_month == 4
    assert updated.instant_late_message() == "Late after 08:30"
    assert service.current() is updated
    assert repo.saved[-1] is updated
    assert before.allowed_lateness_per_month == 3


@pytest.mark.parametrize(
    "changes",
    [
        {"latest_allowed_time": "07:00"},
        {"allowed_lateness_per_month": 0},
        {"auto_report_day": 31},
        {"latest_allowed_time": "quarter past"},
        {"allowed_lateness_per_month": True},
        {"auto_request_message_template": " "},
    ],
)
def test_invalid_update_changes_nothing(service, repo, changes):
    before = service.current()

    with pytest.raises(ValidationError):
        service.update(current_role=Role.ADMIN, changes=changes)

    assert service.current() is before
    assert repo.saved == []


def test_update_is_admin_only(service):
    with pytest.raises(AuthorizationError):
        service.update(current_role=Role.EMPLOYEE, changes={"auto_report_day": 3})


def test_auto_request_placeholder():
    settings = settings_from_dict({"auto_request_message_template": "Late [X] times"})

    assert settings.auto_request_message(4) == "Late 4 times"


def test_unknown_keys_are_ignored():
    assert settings_from_dict({"not_a_setting": 1}) == SystemSettings()


def test_to_dict_formats_times():
    data = SystemSettings().to_dict()

    assert data["latest_allowed_time"] == "08:15"
    assert data["report_sections"]["late_list"] is True
