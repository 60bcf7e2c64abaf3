from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.exceptions import ValidationError
from ..web import (
    admin_required,
    current_identity,
    json_body,
    login_required,
    ok,
    optional_int_arg,
    require_self_or_admin,
    teacher_required,
)
from .report import report_row_to_dict


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance/scan", methods=["POST"], endpoint="attendance_scan")
    @teacher_required
    def attendance_scan():
        data = json_body()
        record = container.scan_validator.scan(
            teacher_id=current_identity().teacher_id,
            qr_token=data.get("qrToken"),
            period_index=data.get("periodIndex"),
        )
        return ok({"attendance": record.to_dict()}, message="Attendance recorded")

    @app.route("/attendance/teachers/<int:teacher_id>", methods=["GET"], endpoint="attendance_for_teacher")
    @login_required
    def attendance_for_teacher(teacher_id: int):
        require_self_or_admin(teacher_id)
        rows = container.attendance_service.history_for_teacher(teacher_id)
        return ok({"attendance": [report_row_to_dict(r) for r in rows]})

    @app.route("/reports/attendance", methods=["GET"], endpoint="attendance_report")
    @admin_required
    def attendance_report():
        day_s = (request.args.get("date") or "").strip()
        try:
            day = parse_iso_date(day_s) if day_s else None
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD")

        data = container.report_service.build(
            day=day,
            teacher_id=optional_int_arg("teacherId"),
            class_id=optional_int_arg("classId"),
            period_index=optional_int_arg("periodIndex"),
        )

        if (request.args.get("format") or "").lower() == "csv":
            return app.response_class(
                container.report_service.to_csv(data),
                mimetype="text/csv",
                headers={"Content-Disposition": "attachment; filename=attendance_report.csv"},
            )
        return ok({"attendance": data.rows})
