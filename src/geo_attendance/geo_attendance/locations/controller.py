from __future__ import annotations

from flask import Flask, request

from ..common.auth import admin_required, current_role, login_required
from ..common.http import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/locations", endpoint="list_locations")
    @login_required
    def list_locations():
        return ok([loc.to_dict() for loc in container.location_service.list_locations()])

    @app.route("/api/locations", methods=["POST"], endpoint="create_location")
    @admin_required
    def create_location():
        body = request.get_json(silent=True) or {}
        location = container.location_service.create_location(
            current_role=current_role(),
            name=body.get("name", ""),
            latitude=body.get("latitude"),
            longitude=body.get("longitude"),
            radius=body.get("radius"),
        )
        return ok(location.to_dict(), status=201)

    @app.route("/api/locations/<int:location_id>", methods=["PUT"], endpoint="update_location")
    @admin_required
    def update_location(location_id: int):
        body = request.get_json(silent=True) or {}
        location = container.location_service.update_location(
            current_role=current_role(),
            location_id=location_id,
            name=body.get("name", ""),
            latitude=body.get("latitude"),
            longitude=body.get("longitude"),
            radius=body.get("radius"),
        )
        return ok(location.to_dict())

    @app.route("/api/locations/<int:location_id>", methods=["DELETE"], endpoint="delete_location")
    @admin_required
    def delete_location(location_id: int):
        container.location_service.delete_location(current_role=current_role(), location_id=location_id)
        return ok()
