from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one accepted scan.

    At most one per (teacher, class, period, calendar day). Never mutated.
    """

    attendance_id: int
    teacher_id: int
    class_id: int
    period_index: int
    scanned_at: datetime

    @property
    def scan_date(self) -> date:
        return self.scanned_at.date()

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "teacherId": self.teacher_id,
            "classId": self.class_id,
            "periodIndex": self.period_index,
            "scannedAt": self.scanned_at.isoformat(timespec="seconds"),
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports/exports (joined with teacher and class)."""

    attendance_id: int
    teacher_id: int
    teacher_name: str
    teacher_nip: Optional[str]
    class_id: int
    class_name: str
    grade: str
    major: Optional[str]
    period_index: int
    scanned_at: datetime
