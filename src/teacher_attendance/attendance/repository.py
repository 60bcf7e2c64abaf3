from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..common.datetime_utils import DayRange
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def find_in_range(
        self,
        *,
        teacher_id: int,
        class_id: int,
        period_index: int,
        day_range: DayRange,
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert(
        self,
        *,
        teacher_id: int,
        class_id: int,
        period_index: int,
        scanned_at: datetime,
    ) -> AttendanceRecord:
        """Insert one record.

        Raises ConflictError when a record for the same (teacher, class, period,
        day) already exists: the store enforces this, not just the caller.
        """

        raise NotImplementedError

    def has_records(self, *, teacher_id: Optional[int] = None, class_id: Optional[int] = None) -> bool:
        """True when any record references the teacher or the class."""

        raise NotImplementedError

    def list_for_teacher(self, *, teacher_id: int, limit: int) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        day: Optional[date] = None,
        teacher_id: Optional[int] = None,
        class_id: Optional[int] = None,
        period_index: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
