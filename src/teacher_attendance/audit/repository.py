from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AuditAction, TargetType
from .model import AuditEntry


class AuditRepository(Protocol):
    def append(
        self,
        *,
        actor_user_id: Optional[int],
        action: AuditAction,
        target_type: TargetType,
        target_id: Optional[int],
        detail: Optional[str],
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def list_recent(self, *, limit: int) -> Sequence[AuditEntry]:
        raise NotImplementedError
