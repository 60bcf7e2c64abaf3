from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AuditAction, TargetType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AuditEntry
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_log(actor_user_id, action, target_type, target_id, detail, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (actor_user_id, action.value, target_type.value, target_id, detail, created_at),
            )
            return int(cur.lastrowid)

    def list_recent(self, *, limit: int) -> Sequence[AuditEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT audit_id, actor_user_id, action, target_type, target_id, detail, created_at
                FROM audit_log
                ORDER BY created_at DESC, audit_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                AuditEntry(
                    audit_id=int(r["audit_id"]),
                    actor_user_id=r.get("actor_user_id"),
                    action=AuditAction(r["action"]),
                    target_type=TargetType(r["target_type"]),
                    target_id=r.get("target_id"),
                    detail=r.get("detail"),
                    created_at=r["created_at"],
                )
                for r in fetchall(cur)
            ]
