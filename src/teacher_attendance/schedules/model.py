from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.enums import Weekday


@dataclass(frozen=True)
class ScheduleSlot:
    """One recurring weekly lesson: (teacher, class, weekday, period)."""

    schedule_id: int
    teacher_id: int
    class_id: int
    weekday: Weekday
    period_index: int
    start_time: time
    end_time: time
    subject: str

    def covers(self, moment: time) -> bool:
        """Inclusive at both ends: the start and end minute both count."""

        return self.start_time <= moment <= self.end_time


@dataclass(frozen=True)
class ScheduleRow:
    """Read-model for schedule lists (joined with teacher and class)."""

    slot: ScheduleSlot
    teacher_name: str
    teacher_nip: str
    class_label: str
