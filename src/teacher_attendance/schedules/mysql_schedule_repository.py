from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import Weekday
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import ScheduleRow, ScheduleSlot
from .repository import ScheduleRepository


def _to_slot(r: dict) -> ScheduleSlot:
    return ScheduleSlot(
        schedule_id=int(r["schedule_id"]),
        teacher_id=int(r["teacher_id"]),
        class_id=int(r["class_id"]),
        weekday=Weekday(r["weekday"]),
        period_index=int(r["period_index"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        subject=r["subject"],
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_slot(
        self,
        *,
        teacher_id: int,
        class_id: int,
        weekday: Weekday,
        period_index: int,
    ) -> Optional[ScheduleSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT schedule_id, teacher_id, class_id, weekday, period_index, start_time, end_time, subject
                FROM schedules
                WHERE teacher_id=%s AND class_id=%s AND weekday=%s AND period_index=%s
                """,
                (int(teacher_id), int(class_id), weekday.value, int(period_index)),
            )
            r = fetchone(cur)
            return _to_slot(r) if r else None

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO schedules(teacher_id, class_id, weekday, period_index, start_time, end_time, subject)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(teacher_id), int(class_id), weekday.value, int(period_index), start_time, end_time, subject),
                )
                schedule_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            raise ConflictError("A lesson is already scheduled for this teacher, class, day and period") from e

        return ScheduleSlot(
            schedule_id=schedule_id,
            teacher_id=int(teacher_id),
            class_id=int(class_id),
            weekday=weekday,
            period_index=int(period_index),
            start_time=start_time,
            end_time=end_time,
            subject=subject,
        )

    def delete(self, *, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schedules WHERE schedule_id=%s", (int(schedule_id),))
            return cur.rowcount > 0

    def list_rows(self, *, teacher_id: Optional[int] = None) -> Sequence[ScheduleRow]:
        clauses = ["1=1"]
        params: list[object] = []
        if teacher_id is not None:
            clauses.append("sc.teacher_id=%s")
            params.append(int(teacher_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    sc.schedule_id, sc.teacher_id, sc.class_id, sc.weekday, sc.period_index,
                    sc.start_time, sc.end_time, sc.subject,
                    t.full_name, t.nip,
                    c.class_name, c.grade
                FROM schedules sc
                JOIN teachers t ON t.teacher_id = sc.teacher_id
                JOIN classes c ON c.class_id = sc.class_id
                WHERE {where}
                ORDER BY FIELD(sc.weekday, 'MONDAY','TUESDAY','WEDNESDAY','THURSDAY','FRIDAY','SATURDAY','SUNDAY'),
                         sc.period_index ASC, t.full_name ASC
                """,
                tuple(params),
            )
            return [
                ScheduleRow(
                    slot=_to_slot(r),
                    teacher_name=r["full_name"],
                    teacher_nip=r.get("nip") or "",
                    class_label=f"{r['grade']} {r['class_name']}",
                )
                for r in fetchall(cur)
            ]
