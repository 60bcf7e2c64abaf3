from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import format_hhmm
from ..container import Container
from ..web import admin_required, current_identity, json_body, login_required, ok, require_self_or_admin
from .model import ScheduleRow, ScheduleSlot


def slot_to_dict(slot: ScheduleSlot) -> dict:
    return {
        "id": slot.schedule_id,
        "teacherId": slot.teacher_id,
        "classId": slot.class_id,
        "weekday": slot.weekday.value,
        "periodIndex": slot.period_index,
        "startTime": format_hhmm(slot.start_time),
        "endTime": format_hhmm(slot.end_time),
        "subject": slot.subject,
    }


def row_to_dict(row: ScheduleRow) -> dict:
    out = slot_to_dict(row.slot)
    out["teacher"] = {"name": row.teacher_name, "nip": row.teacher_nip}
    out["class"] = row.class_label
    return out


def register(app: Flask, container: Container) -> None:
    @app.route("/schedules", methods=["GET"], endpoint="schedules_list")
    @admin_required
    def schedules_list():
        return ok({"schedules": [row_to_dict(r) for r in container.schedule_service.list_all()]})

    @app.route("/schedules", methods=["POST"], endpoint="schedules_create")
    @admin_required
    def schedules_create():
        data = json_body()
        slot = container.schedule_service.create(
            actor=current_identity(),
            teacher_id=data.get("teacherId"),
            class_id=data.get("classId"),
            weekday=data.get("weekday"),
            period_index=data.get("periodIndex"),
            start_time=data.get("startTime"),
            end_time=data.get("endTime"),
            subject=data.get("subject"),
        )
        return ok({"schedule": slot_to_dict(slot)}, status=201, message="Schedule created")

    @app.route("/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="schedules_delete")
    @admin_required
    def schedules_delete(schedule_id: int):
        container.schedule_service.delete(actor=current_identity(), schedule_id=schedule_id)
        return ok(message="Schedule deleted")

    @app.route("/schedules/teachers/<int:teacher_id>", methods=["GET"], endpoint="schedules_for_teacher")
    @login_required
    def schedules_for_teacher(teacher_id: int):
        require_self_or_admin(teacher_id)
        rows = container.schedule_service.list_for_teacher(teacher_id)
        return ok({"schedules": [row_to_dict(r) for r in rows]})
