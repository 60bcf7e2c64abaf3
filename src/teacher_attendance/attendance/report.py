from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .model import AttendanceReportRow
from .repository import AttendanceRepository

REPORT_FIELDS = [
    "id",
    "teacher_name",
    "teacher_nip",
    "class_name",
    "grade",
    "major",
    "period_index",
    "scanned_at",
]


def report_row_to_dict(r: AttendanceReportRow) -> dict:
    return {
        "id": r.attendance_id,
        "teacher_id": r.teacher_id,
        "teacher_name": r.teacher_name,
        "teacher_nip": r.teacher_nip or "",
        "class_id": r.class_id,
        "class_name": r.class_name,
        "grade": r.grade,
        "major": r.major or "",
        "period_index": r.period_index,
        "scanned_at": r.scanned_at.strftime("%Y-%m-%d %H:%M:%S"),
    }


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]


class AttendanceReportService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def build(
        self,
        *,
        day: Optional[date] = None,
        teacher_id: Optional[int] = None,
        class_id: Optional[int] = None,
        period_index: Optional[int] = None,
    ) -> ReportData:
        rows = self._attendance.get_report_rows(
            day=day,
            teacher_id=teacher_id,
            class_id=class_id,
            period_index=period_index,
        )
        return ReportData(rows=[report_row_to_dict(r) for r in rows])

    @staticmethod
    def to_csv(data: ReportData) -> bytes:
        """Write report rows as CSV (UTF-8 with BOM so spreadsheet apps read it right)."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)
        return out.getvalue().encode("utf-8-sig")
