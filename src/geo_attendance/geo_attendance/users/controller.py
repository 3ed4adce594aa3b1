from __future__ import annotations

from datetime import timedelta

from flask import Flask, request, session

from ..common.auth import admin_required, current_role, current_user_id, login_required
from ..common.http import ok
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        body = request.get_json(silent=True) or {}
        s_user = container.auth_service.authenticate(body.get("username", ""), body.get("password", ""))

        session.clear()
        session.permanent = bool(body.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["department"] = s_user.department or ""

        return ok({"id": s_user.user_id, "name": s_user.full_name, "role": s_user.role.value})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/api/me", endpoint="me")
    @login_required
    def me():
        user = container.user_service.get(current_user_id())
        if not user:
            session.clear()
            raise NotFoundError("User not found")
        return ok(user.to_dict())

    @app.route("/api/admin/users", endpoint="admin_users")
    @admin_required
    def admin_users():
        return ok([u.to_dict() for u in container.user_service.list_employees()])

    @app.route("/api/admin/users", methods=["POST"], endpoint="add_user")
    @admin_required
    def add_user():
        body = request.get_json(silent=True) or {}
        try:
            role = Role(body.get("role", Role.EMPLOYEE.value))
        except ValueError:
            raise ValidationError("Invalid role")

        user_id = container.user_service.create_account(
            current_role=current_role(),
            full_name=body.get("full_name", ""),
            username=body.get("username", ""),
            password=body.get("password", ""),
            role=role,
            department=body.get("department"),
            device_user_id=body.get("device_user_id"),
        )
        return ok({"id": user_id}, status=201)
