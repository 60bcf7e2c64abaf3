from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Wall clock, optionally pinned to the school's timezone.

    Returns naive local datetimes: that is what MySQL DATETIME columns hold.
    """

    def __init__(self, timezone: Optional[str] = None):
        self._tz = ZoneInfo(timezone) if timezone else None

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now()
        return datetime.now(self._tz).replace(tzinfo=None)


@dataclass(frozen=True)
class DayRange:
    """Inclusive bounds of one calendar day, 00:00:00 through 23:59:59."""

    start: datetime
    end: datetime

    @classmethod
    def containing(cls, moment: datetime) -> "DayRange":
        day = moment.date()
        return cls(
            start=datetime.combine(day, time(0, 0, 0)),
            end=datetime.combine(day, time(23, 59, 59)),
        )

    @property
    def day(self) -> date:
        return self.start.date()


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (seconds tolerated and dropped) into a time."""
    raw = (value or "").strip()
    fmt = "%H:%M:%S" if raw.count(":") == 2 else "%H:%M"
    return datetime.strptime(raw, fmt).time().replace(second=0)


def truncate_to_minute(moment: datetime) -> time:
    """Time-of-day at HH:MM granularity."""
    return moment.time().replace(second=0, microsecond=0)


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")
