from datetime import datetime

import pytest

from fakes import HEAD_OFFICE, build_fake_container, make_user
from src.geo_attendance.geo_attendance.core.enums import Role
from src.geo_attendance.geo_attendance.settings.model import SystemSettings


@pytest.fixture
def fixed_now():
    # a Monday, five minutes past the default 08:15 threshold
    return datetime(2026, 3, 9, 8, 20)


@pytest.fixture
def settings():
    return SystemSettings()


@pytest.fixture
def employee():
    return make_user(10, department="Sales")


@pytest.fixture
def admin():
    return make_user(1, role=Role.ADMIN, department="Management", password="admin123")


@pytest.fixture
def container(admin, employee):
    return build_fake_container(users=[admin, employee], locations=[HEAD_OFFICE])
