from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: login account.

    Note: plain data object (no DB access code). ``device_id`` is the single
    device binding for teacher accounts; ``None`` means unbound.
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    device_id: Optional[str] = None

    @property
    def is_device_bound(self) -> bool:
        return bool(self.device_id)


@dataclass(frozen=True)
class UserAdminRow:
    """Read-model for the admin account list (teacher fields set for teacher accounts)."""

    user_id: int
    username: str
    role: Role
    device_id: Optional[str]
    teacher_id: Optional[int] = None
    teacher_name: Optional[str] = None
    teacher_nip: Optional[str] = None
