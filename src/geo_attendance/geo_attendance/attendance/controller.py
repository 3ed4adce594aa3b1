from __future__ import annotations

from flask import Flask, request

from ..common.auth import current_user_id, login_required
from ..common.http import ok
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..locations.geolocation import parse_position
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="check_in")
    @login_required
    def check_in():
        body = request.get_json(silent=True) or {}
        position = parse_position(body)
        record = container.attendance_service.check_in(
            current_user_id(), position=position, excuse=body.get("excuse")
        )
        return ok(record.to_dict(), status=201)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="check_out")
    @login_required
    def check_out():
        record = container.attendance_service.check_out(current_user_id())
        return ok(record.to_dict())

    @app.route("/api/attendance/today", endpoint="attendance_today")
    @login_required
    def today():
        state, record = container.attendance_service.today_state(current_user_id())
        return ok(
            {
                "state": state.value,
                "record": record.to_dict() if record else None,
                "latest_allowed_time": container.attendance_service.late_threshold_label(),
            }
        )

    @app.route("/api/attendance/history", endpoint="attendance_history")
    @login_required
    def history():
        limit = request.args.get("limit", DEFAULT_HISTORY_LIMIT, type=int)
        rows = container.attendance_service.history(current_user_id(), limit=limit)
        return ok([r.to_dict() for r in rows])
