from datetime import date, datetime

import pytest

from fakes import InMemoryNotifications, build_fake_container
from src.geo_attendance.geo_attendance.core.constants import NEW_REQUEST_TITLE, REQUEST_DECIDED_TITLE
from src.geo_attendance.geo_attendance.core.enums import RequestStatus, RequestType, Role
from src.geo_attendance.geo_attendance.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    RequestAlreadyDecidedError,
    ValidationError,
)

NOW = datetime(2026, 3, 9, 10, 0)


def _submit_leave(container, employee, **overrides):
    kwargs = dict(
        current_role=Role.EMPLOYEE,
        user_id=employee.user_id,
        start_date=date(2026, 3, 16),
        duration_days=3,
        reason="Family visit",
        now=NOW,
    )
    kwargs.update(overrides)
    return container.request_service.submit_leave(**kwargs)


def test_submit_leave_notifies_admins(container, admin, employee):
    request_id = _submit_leave(container, employee)

    req = container.requests_repo.get(RequestType.LEAVE, request_id)
    assert req.status == RequestStatus.PENDING
    assert req.end_date == date(2026, 3, 18)

    [note] = container.notifications_repo.titled(NEW_REQUEST_TITLE)
    assert note.target.user_ids == {admin.user_id}
    assert "3 day(s)" in note.message


@pytest.mark.parametrize("duration", [0, -1, "abc", None])
def test_leave_duration_must_be_positive(container, employee, duration):
    with pytest.raises(ValidationError):
        _submit_leave(container, employee, duration_days=duration)


def test_leave_reason_is_required(container, employee):
    with pytest.raises(ValidationError):
        _submit_leave(container, employee, reason="   ")


def test_admins_cannot_submit_requests(container, admin):
    with pytest.raises(AuthorizationError):
        _submit_leave(container, admin, current_role=Role.ADMIN)


def test_future_excuse_is_rejected(container, employee):
    with pytest.raises(ValidationError):
        container.request_service.submit_excuse(
            current_role=Role.EMPLOYEE,
            user_id=employee.user_id,
            excuse_date=date(2026, 3, 10),
            reason="Doctor",
            now=NOW,
        )


def test_excuse_for_today_is_accepted(container, employee):
    request_id = container.request_service.submit_excuse(
        current_role=Role.EMPLOYEE,
        user_id=employee.user_id,
        excuse_date=NOW.date(),
        reason="Doctor",
        now=NOW,
    )

    assert container.requests_repo.get(RequestType.EXCUSE, request_id).excuse_date == NOW.date()


def test_approve_notifies_employee(container, admin, employee):
    request_id = _submit_leave(container, employee)

    decided = container.request_service.approve(
        current_role=Role.ADMIN, admin_user_id=admin.user_id, kind=RequestType.LEAVE, request_id=request_id,
        admin_note="Enjoy",
    )

    assert decided.status == RequestStatus.APPROVED
    assert decided.decided_by == admin.user_id
    assert decided.admin_note == "Enjoy"
    [note] = container.notifications_repo.titled(REQUEST_DECIDED_TITLE)
    assert note.target.user_ids == {employee.user_id}
    assert note.message == "Your leave request was approved"


def test_request_is_decided_exactly_once(container, admin, employee):
    request_id = _submit_leave(container, employee)
    container.request_service.reject(
        current_role=Role.ADMIN, admin_user_id=admin.user_id, kind=RequestType.LEAVE, request_id=request_id
    )

    with pytest.raises(RequestAlreadyDecidedError):
        container.request_service.approve(
            current_role=Role.ADMIN, admin_user_id=admin.user_id, kind=RequestType.LEAVE, request_id=request_id
        )
    assert container.requests_repo.get(RequestType.LEAVE, request_id).status == RequestStatus.REJECTED


def test_decide_unknown_request(container, admin):
    with pytest.raises(NotFoundError):
        container.request_service.approve(
            current_role=Role.ADMIN, admin_user_id=admin.user_id, kind=RequestType.EXCUSE, request_id=99
        )


def test_employee_cannot_decide(container, employee):
    request_id = _submit_leave(container, employee)

    with pytest.raises(AuthorizationError):
        container.request_service.approve(
            current_role=Role.EMPLOYEE, admin_user_id=employee.user_id, kind=RequestType.LEAVE, request_id=request_id
        )


def test_pending_list_is_admin_only(container, employee):
    _submit_leave(container, employee)

    assert len(container.request_service.list_pending(current_role=Role.ADMIN)) == 1
    with pytest.raises(AuthorizationError):
        container.request_service.list_pending(current_role=Role.EMPLOYEE)


def test_notification_outage_does_not_lose_the_request(admin, employee):
    container = build_fake_container(users=[admin, employee], notifications=InMemoryNotifications(fail=True))

    request_id = _submit_leave(container, employee)

    assert container.requests_repo.get(RequestType.LEAVE, request_id) is not None
