from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..container import Container
from ..web import admin_required, current_identity, json_body, login_required, ok
from .identity import identity_to_dict
from .model import UserAdminRow


def user_row_to_dict(row: UserAdminRow) -> dict:
    out = {"userId": row.user_id, "username": row.username, "role": row.role.value, "deviceId": row.device_id}
    if row.teacher_id is not None:
        out["teacher"] = {"id": row.teacher_id, "name": row.teacher_name, "nip": row.teacher_nip}
    return out


def register(app: Flask, container: Container, *, session_hours: int) -> None:
    app.permanent_session_lifetime = timedelta(hours=session_hours)

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        identity = container.auth_service.authenticate(
            str(data.get("username") or ""),
            str(data.get("password") or ""),
            data.get("deviceId"),
        )

        session.clear()
        session.permanent = True
        session["user_id"] = identity.user_id
        return ok({"user": identity_to_dict(identity)}, message="Login successful")

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logged out")

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok({"user": identity_to_dict(current_identity())})

    @app.route("/auth/change-password", methods=["POST"], endpoint="change_password")
    @login_required
    def change_password():
        data = json_body()
        container.auth_service.change_password(
            user_id=current_identity().user_id,
            old_password=str(data.get("oldPassword") or ""),
            new_password=str(data.get("newPassword") or ""),
        )
        return ok(message="Password changed")

    @app.route("/users", methods=["GET"], endpoint="users_list")
    @admin_required
    def users_list():
        return ok({"users": [user_row_to_dict(r) for r in container.user_service.list_all()]})

    @app.route("/users/<int:user_id>", methods=["DELETE"], endpoint="users_delete")
    @admin_required
    def users_delete(user_id: int):
        container.user_service.delete(actor=current_identity(), user_id=user_id)
        return ok(message="User deleted")
