from __future__ import annotations

from flask import Flask, request

from ..common.auth import admin_required, current_role, current_user_id, login_required
from ..common.http import ok
from ..common.validators import parse_id_list
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", endpoint="list_notifications")
    @login_required
    def list_notifications():
        limit = request.args.get("limit", DEFAULT_NOTIFICATION_LIMIT, type=int)
        if current_role() == Role.ADMIN:
            items = container.notification_service.list_recent(current_user_id(), limit=limit)
        else:
            items = container.notification_service.list_for_user(current_user_id(), limit=limit)
        return ok([n.to_dict() for n in items])

    @app.route("/api/notifications", methods=["POST"], endpoint="send_notification")
    @admin_required
    def send_notification():
        body = request.get_json(silent=True) or {}
        notification = container.notification_service.send(
            current_role=current_role(),
            title=body.get("title", ""),
            message=body.get("message", ""),
            user_ids=parse_id_list(body.get("target_user_ids")),
        )
        return ok(notification.to_dict(), status=201)

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="read_notification")
    @login_required
    def read_notification(notification_id: int):
        container.notification_service.mark_read(
            notification_id, user_id=current_user_id(), current_role=current_role()
        )
        return ok()
