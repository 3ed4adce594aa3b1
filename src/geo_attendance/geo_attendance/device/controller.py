from __future__ import annotations

import hmac

from flask import Flask, request

from ..common.auth import admin_required, current_role
from ..common.http import ok
from ..core.exceptions import AuthenticationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/fingerprint/test", methods=["POST"], endpoint="fingerprint_test")
    @admin_required
    def fingerprint_test():
        body = request.get_json(silent=True) or {}
        result = container.fingerprint_service.test_connection(
            current_role=current_role(),
            url=body.get("url"),
            username=body.get("username", ""),
            password=body.get("password", ""),
        )
        return ok(result)

    @app.route("/api/admin/fingerprint/sync", methods=["POST"], endpoint="fingerprint_sync")
    @admin_required
    def fingerprint_sync():
        body = request.get_json(silent=True) or {}
        result = container.fingerprint_service.sync_employees(
            current_role=current_role(),
            url=body.get("url"),
            username=body.get("username", ""),
            password=body.get("password", ""),
        )
        return ok(result)

    @app.route("/api/device/logs", methods=["POST"], endpoint="device_logs")
    def device_logs():
        expected = app.config.get("DEVICE_CONNECTOR_TOKEN") or ""
        header = request.headers.get("Authorization", "")
        token = header[7:].strip() if header.lower().startswith("bearer ") else ""
        if not expected or not hmac.compare_digest(token, expected):
            raise AuthenticationError("Invalid connector token")

        body = request.get_json(silent=True) or {}
        logs = body.get("logs")
        if not isinstance(logs, list):
            raise ValidationError("logs must be a list")

        result = container.device_service.import_logs(logs)
        return ok(result.to_dict())
