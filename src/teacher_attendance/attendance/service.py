from __future__ import annotations

from typing import Sequence

from ..classes.repository import ClassRepository
from ..common.datetime_utils import Clock, DayRange, truncate_to_minute
from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import ScanRejection, Weekday
from ..core.exceptions import ConflictError, InvalidStateError, NotFoundError
from ..schedules.repository import ScheduleRepository
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository


class ScanValidator:
    """Decide whether one attendance scan is accepted.

    Steps run in order and the first failure is the outcome:
    class by QR token, scheduled slot for today's weekday, one record per
    (teacher, class, period, day), inclusive lesson window at minute
    granularity. A repeat scan is reported as a duplicate even once the
    window has closed.
    Only an accepted scan writes to the store. Scans are not audited.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        classes: ClassRepository,
        schedules: ScheduleRepository,
        clock: Clock,
    ):
        self._attendance = attendance
        self._classes = classes
        self._schedules = schedules
        self._clock = clock

    def scan(self, *, teacher_id: int, qr_token: str, period_index: int) -> AttendanceRecord:
        qr_token = require_non_empty(qr_token, "QR token")
        period_index = require_positive_int(period_index, "Period")
        now = self._clock.now()

        school_class = self._classes.get_by_qr_token(qr_token)
        if not school_class:
            raise NotFoundError("QR code is not valid", code=ScanRejection.INVALID_QR_TOKEN.value)

        slot = self._schedules.find_slot(
            teacher_id=teacher_id,
            class_id=school_class.class_id,
            weekday=Weekday.from_date(now.date()),
            period_index=period_index,
        )
        if not slot:
            raise NotFoundError(
                "No lesson is scheduled for you in this class and period today",
                code=ScanRejection.NO_SCHEDULED_LESSON.value,
            )

        existing = self._attendance.find_in_range(
            teacher_id=teacher_id,
            class_id=school_class.class_id,
            period_index=period_index,
            day_range=DayRange.containing(now),
        )
        if existing:
            raise ConflictError(
                "Attendance for this lesson period was already recorded today",
                code=ScanRejection.ALREADY_SCANNED.value,
            )

        if not slot.covers(truncate_to_minute(now)):
            raise InvalidStateError(
                "Attendance can only be recorded during the scheduled lesson time",
                code=ScanRejection.OUTSIDE_LESSON_WINDOW.value,
            )

        return self._attendance.insert(
            teacher_id=teacher_id,
            class_id=school_class.class_id,
            period_index=period_index,
            scanned_at=now,
        )


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def history_for_teacher(
        self, teacher_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> Sequence[AttendanceReportRow]:
        return self._attendance.list_for_teacher(teacher_id=int(teacher_id), limit=int(limit))
