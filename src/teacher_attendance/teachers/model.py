from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Teacher:
    """Domain entity: teacher profile, owned by one account."""

    teacher_id: int
    user_id: int
    full_name: str
    nip: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class TeacherAdminRow:
    """Read-model for the admin teacher list (joined with the account)."""

    teacher_id: int
    user_id: int
    full_name: str
    nip: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    username: str
    device_id: Optional[str]
