from __future__ import annotations

from flask import Flask, request

from ..common.auth import admin_required, current_role, current_user_id, login_required
from ..common.http import ok
from ..common.validators import require_date
from ..core.enums import RequestType
from ..core.exceptions import NotFoundError
from ..container import Container


def _kind(value: str) -> RequestType:
    try:
        return RequestType(value)
    except ValueError:
        raise NotFoundError("Unknown request type")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/requests", endpoint="my_requests")
    @login_required
    def my_requests():
        return ok([r.to_dict() for r in container.request_service.list_for_user(current_user_id())])

    @app.route("/api/requests/leave", methods=["POST"], endpoint="new_leave")
    @login_required
    def new_leave():
        body = request.get_json(silent=True) or {}
        request_id = container.request_service.submit_leave(
            current_role=current_role(),
            user_id=current_user_id(),
            start_date=require_date(body.get("date"), "Date"),
            duration_days=body.get("duration_days", 1),
            reason=body.get("reason", ""),
        )
        return ok({"id": request_id, "type": RequestType.LEAVE.value}, status=201)

    @app.route("/api/requests/excuse", methods=["POST"], endpoint="new_excuse")
    @login_required
    def new_excuse():
        body = request.get_json(silent=True) or {}
        request_id = container.request_service.submit_excuse(
            current_role=current_role(),
            user_id=current_user_id(),
            excuse_date=require_date(body.get("date"), "Date"),
            reason=body.get("reason", ""),
        )
        return ok({"id": request_id, "type": RequestType.EXCUSE.value}, status=201)

    @app.route("/api/admin/requests/pending", endpoint="admin_pending_requests")
    @admin_required
    def admin_pending_requests():
        items = container.request_service.list_pending(current_role=current_role())
        return ok([r.to_dict() for r in items])

    @app.route("/api/admin/requests/<kind>/<int:request_id>/approve", methods=["POST"], endpoint="approve_request")
    @admin_required
    def approve_request(kind: str, request_id: int):
        body = request.get_json(silent=True) or {}
        req = container.request_service.approve(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            kind=_kind(kind),
            request_id=request_id,
            admin_note=body.get("admin_note", ""),
        )
        return ok(req.to_dict())

    @app.route("/api/admin/requests/<kind>/<int:request_id>/reject", methods=["POST"], endpoint="reject_request")
    @admin_required
    def reject_request(kind: str, request_id: int):
        body = request.get_json(silent=True) or {}
        req = container.request_service.reject(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            kind=_kind(kind),
            request_id=request_id,
            admin_note=body.get("admin_note", ""),
        )
        return ok(req.to_dict())
