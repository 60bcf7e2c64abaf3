from __future__ import annotations

from flask import Flask

from ..container import Container
from ..web import admin_required, ok
from .model import AuditEntry


def entry_to_dict(e: AuditEntry) -> dict:
    return {
        "id": e.audit_id,
        "actorUserId": e.actor_user_id,
        "action": e.action.value,
        "targetType": e.target_type.value,
        "targetId": e.target_id,
        "detail": e.detail or "",
        "createdAt": e.created_at.isoformat(timespec="seconds"),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/audit-log", methods=["GET"], endpoint="audit_log")
    @admin_required
    def audit_log():
        return ok({"logs": [entry_to_dict(e) for e in container.audit_service.recent()]})
