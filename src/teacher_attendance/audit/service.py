from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import Clock
from ..core.constants import DEFAULT_AUDIT_LIMIT
from ..core.enums import AuditAction, TargetType
from .model import AuditEntry
from .repository import AuditRepository


class AuditService:
    """Use case: append to and read the audit log.

    Scans are deliberately not audited; only administrative and
    authentication actions are.
    """

    def __init__(self, audit: AuditRepository, clock: Clock):
        self._audit = audit
        self._clock = clock

    def record(
        self,
        *,
        actor_user_id: Optional[int],
        action: AuditAction,
        target_type: TargetType,
        target_id: Optional[int] = None,
        detail: Optional[str] = None,
    ) -> int:
        return self._audit.append(
            actor_user_id=actor_user_id,
            action=action,
            target_type=target_type,
            target_id=target_id,
            detail=detail,
            created_at=self._clock.now(),
        )

    def recent(self, *, limit: int = DEFAULT_AUDIT_LIMIT) -> Sequence[AuditEntry]:
        return self._audit.list_recent(limit=max(1, int(limit)))
