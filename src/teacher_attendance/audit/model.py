from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AuditAction, TargetType


@dataclass(frozen=True)
class AuditEntry:
    """Append-only record of an administrative or authentication action."""

    audit_id: int
    actor_user_id: Optional[int]
    action: AuditAction
    target_type: TargetType
    target_id: Optional[int]
    detail: Optional[str]
    created_at: datetime
