from __future__ import annotations

from flask import Flask, request

from ..common.auth import admin_required, current_role
from ..common.http import ok
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/settings", endpoint="get_settings")
    @admin_required
    def get_settings():
        return ok(container.settings_service.current().to_dict())

    @app.route("/api/admin/settings", methods=["PUT"], endpoint="update_settings")
    @admin_required
    def update_settings():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise ValidationError("Expected a JSON object")
        updated = container.settings_service.update(current_role=current_role(), changes=body)
        return ok(updated.to_dict())
