from __future__ import annotations

from dataclasses import asdict

from flask import Flask

from ..container import Container
from ..web import admin_required, current_identity, json_body, ok


def register(app: Flask, container: Container) -> None:
    @app.route("/teachers", methods=["GET"], endpoint="teachers_list")
    @admin_required
    def teachers_list():
        return ok({"teachers": [asdict(t) for t in container.teacher_service.list_all()]})

    @app.route("/teachers", methods=["POST"], endpoint="teachers_create")
    @admin_required
    def teachers_create():
        data = json_body()
        teacher = container.teacher_service.create(
            actor=current_identity(),
            full_name=data.get("name"),
            username=data.get("username"),
            password=data.get("password"),
            nip=data.get("nip"),
            email=data.get("email"),
            phone=data.get("phone"),
        )
        return ok({"teacher": asdict(teacher)}, status=201, message="Teacher created")

    @app.route("/teachers/<int:teacher_id>", methods=["DELETE"], endpoint="teachers_delete")
    @admin_required
    def teachers_delete(teacher_id: int):
        container.teacher_service.delete(actor=current_identity(), teacher_id=teacher_id)
        return ok(message="Teacher deleted")

    @app.route("/teachers/<int:teacher_id>/reset-device", methods=["POST"], endpoint="teachers_reset_device")
    @admin_required
    def teachers_reset_device(teacher_id: int):
        container.teacher_service.reset_device(actor=current_identity(), teacher_id=teacher_id)
        return ok(message="Teacher device reset")
