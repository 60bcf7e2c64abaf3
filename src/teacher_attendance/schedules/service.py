from __future__ import annotations

from typing import Sequence

from ..audit.service import AuditService
from ..classes.repository import ClassRepository
from ..common.datetime_utils import format_hhmm, parse_hhmm
from ..common.validators import require_non_empty, require_positive_int
from ..core.enums import AuditAction, TargetType, Weekday
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..teachers.repository import TeacherRepository
from ..users.identity import AdminIdentity
from .model import ScheduleRow, ScheduleSlot
from .repository import ScheduleRepository


class ScheduleService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        teachers: TeacherRepository,
        classes: ClassRepository,
        audit: AuditService,
    ):
        self._schedules = schedules
        self._teachers = teachers
        self._classes = classes
        self._audit = audit

    def list_all(self) -> Sequence[ScheduleRow]:
        return self._schedules.list_rows()

    def list_for_teacher(self, teacher_id: int) -> Sequence[ScheduleRow]:
        if not self._teachers.get_by_id(int(teacher_id)):
            raise NotFoundError("Teacher not found")
        return self._schedules.list_rows(teacher_id=int(teacher_id))

    def create(
        self,
        *,
        actor: AdminIdentity,
        teacher_id: int,
        class_id: int,
        weekday: str,
        period_index: int,
        start_time: str,
        end_time: str,
        subject: str,
    ) -> ScheduleSlot:
        teacher_id = require_positive_int(teacher_id, "Teacher")
        class_id = require_positive_int(class_id, "Class")
        period_index = require_positive_int(period_index, "Period")
        subject = require_non_empty(subject, "Subject")

        try:
            day = Weekday.parse(weekday)
        except ValueError:
            raise ValidationError("Weekday is invalid (MONDAY..SUNDAY or 1..7)")
        try:
            start = parse_hhmm(start_time)
            end = parse_hhmm(end_time)
        except (TypeError, ValueError):
            raise ValidationError("Time is invalid (HH:MM)")
        if start > end:
            raise ValidationError("Start time must not be after end time")

        if not self._teachers.get_by_id(teacher_id):
            raise NotFoundError("Teacher not found")
        school_class = self._classes.get_by_id(class_id)
        if not school_class:
            raise NotFoundError("Class not found")

        existing = self._schedules.find_slot(
            teacher_id=teacher_id,
            class_id=class_id,
            weekday=day,
            period_index=period_index,
        )
        if existing:
            raise ConflictError("A lesson is already scheduled for this teacher, class, day and period")

        slot = self._schedules.create(
            teacher_id=teacher_id,
            class_id=class_id,
            weekday=day,
            period_index=period_index,
            start_time=start,
            end_time=end,
            subject=subject,
        )
        self._audit.record(
            actor_user_id=actor.user_id,
            action=AuditAction.CREATE,
            target_type=TargetType.SCHEDULE,
            target_id=slot.schedule_id,
            detail=(
                f"Schedule created: {subject} for class {school_class.label}, "
                f"{day.value} period {period_index} ({format_hhmm(start)}-{format_hhmm(end)})"
            ),
        )
        return slot

    def delete(self, *, actor: AdminIdentity, schedule_id: int) -> None:
        if not self._schedules.delete(schedule_id=int(schedule_id)):
            raise NotFoundError("Schedule not found")
        self._audit.record(
            actor_user_id=actor.user_id,
            action=AuditAction.DELETE,
            target_type=TargetType.SCHEDULE,
            target_id=int(schedule_id),
            detail=f"Schedule deleted: {int(schedule_id)}",
        )
