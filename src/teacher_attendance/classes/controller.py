from __future__ import annotations

from dataclasses import asdict

from flask import Flask

from ..container import Container
from ..web import admin_required, current_identity, json_body, ok


def register(app: Flask, container: Container) -> None:
    @app.route("/classes", methods=["GET"], endpoint="classes_list")
    @admin_required
    def classes_list():
        return ok({"classes": [asdict(c) for c in container.class_service.list_all()]})

    @app.route("/classes", methods=["POST"], endpoint="classes_create")
    @admin_required
    def classes_create():
        data = json_body()
        school_class = container.class_service.create(
            actor=current_identity(),
            class_name=data.get("name"),
            grade=data.get("grade"),
            major=data.get("major"),
        )
        return ok({"class": asdict(school_class)}, status=201, message="Class created")

    @app.route("/classes/<int:class_id>", methods=["DELETE"], endpoint="classes_delete")
    @admin_required
    def classes_delete(class_id: int):
        container.class_service.delete(actor=current_identity(), class_id=class_id)
        return ok(message="Class deleted")

    @app.route("/classes/<int:class_id>/qrcode", methods=["GET"], endpoint="classes_qrcode")
    @admin_required
    def classes_qrcode(class_id: int):
        png = container.class_service.qr_png(class_id)
        return app.response_class(png, mimetype="image/png")
