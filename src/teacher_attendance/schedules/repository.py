from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from ..core.enums import Weekday
from .model import ScheduleRow, ScheduleSlot


class ScheduleRepository(Protocol):
    def find_slot(
        self,
        *,
        teacher_id: int,
        class_id: int,
        weekday: Weekday,
        period_index: int,
    ) -> Optional[ScheduleSlot]:
        raise NotImplementedError

    def create(
        self,
        *,
        teacher_id: int,
        class_id: int,
        weekday: Weekday,
        period_index: int,
        start_time: time,
        end_time: time,
        subject: str,
    ) -> ScheduleSlot:
        """Raises ConflictError if the (teacher, class, weekday, period) slot exists."""

        raise NotImplementedError

    def delete(self, *, schedule_id: int) -> bool:
        raise NotImplementedError

    def list_rows(self, *, teacher_id: Optional[int] = None) -> Sequence[ScheduleRow]:
        """List slots for UI tables (joined with teacher/class)."""

        raise NotImplementedError
