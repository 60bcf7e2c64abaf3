from __future__ import annotations

from datetime import date
from enum import Enum


class Role(str, Enum):
    """Account role used for authorization."""

    ADMIN = "admin"
    TEACHER = "teacher"


class Weekday(str, Enum):
    """Canonical weekday stored on schedule slots and used for lookup."""

    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_date(cls, value: date) -> "Weekday":
        return list(cls)[value.isoweekday() - 1]

    @classmethod
    def parse(cls, value: object) -> "Weekday":
        """Accept an enum name in any case or an ISO weekday number (1=Monday)."""

        raw = str(value if value is not None else "").strip()
        if raw.isdigit():
            n = int(raw)
            if 1 <= n <= 7:
                return list(cls)[n - 1]
            raise ValueError(f"Invalid weekday number: {raw!r}")
        return cls(raw.upper())


class ScanRejection(str, Enum):
    """Reason codes for a rejected attendance scan."""

    INVALID_QR_TOKEN = "INVALID_QR_TOKEN"
    NO_SCHEDULED_LESSON = "NO_SCHEDULED_LESSON"
    OUTSIDE_LESSON_WINDOW = "OUTSIDE_LESSON_WINDOW"
    ALREADY_SCANNED = "ALREADY_SCANNED"


class AuditAction(str, Enum):
    LOGIN = "LOGIN"
    SIGNUP = "SIGNUP"
    CREATE = "CREATE"
    DELETE = "DELETE"
    RESET_DEVICE = "RESET_DEVICE"
    CHANGE_PASSWORD = "CHANGE_PASSWORD"


class TargetType(str, Enum):
    USER = "user"
    ADMIN = "admin"
    TEACHER = "teacher"
    CLASS = "class"
    SCHEDULE = "schedule"


class AuthRejection(str, Enum):
    DEVICE_MISMATCH = "DEVICE_MISMATCH"
    WRONG_ROLE = "WRONG_ROLE"
