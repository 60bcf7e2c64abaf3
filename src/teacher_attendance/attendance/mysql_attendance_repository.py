from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..common.datetime_utils import DayRange
from ..core.enums import ScanRejection
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_REPORT_SELECT = """
    SELECT
        ar.attendance_id, ar.teacher_id, ar.class_id, ar.period_index, ar.scanned_at,
        t.full_name, t.nip,
        c.class_name, c.grade, c.major
    FROM attendance_records ar
    JOIN teachers t ON t.teacher_id = ar.teacher_id
    JOIN classes c ON c.class_id = ar.class_id
"""


def _to_report_row(r: dict) -> AttendanceReportRow:
    return AttendanceReportRow(
        attendance_id=int(r["attendance_id"]),
        teacher_id=int(r["teacher_id"]),
        teacher_name=r["full_name"],
        teacher_nip=r.get("nip"),
        class_id=int(r["class_id"]),
        class_name=r["class_name"],
        grade=r["grade"],
        major=r.get("major"),
        period_index=int(r["period_index"]),
        scanned_at=r["scanned_at"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_in_range(
        self,
        *,
        teacher_id: int,
        class_id: int,
        period_index: int,
        day_range: DayRange,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, teacher_id, class_id, period_index, scanned_at
                FROM attendance_records
                WHERE teacher_id=%s AND class_id=%s AND period_index=%s
                  AND scanned_at BETWEEN %s AND %s
                ORDER BY scanned_at ASC
                LIMIT 1
                """,
                (int(teacher_id), int(class_id), int(period_index), day_range.start, day_range.end),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceRecord(
                attendance_id=int(r["attendance_id"]),
                teacher_id=int(r["teacher_id"]),
                class_id=int(r["class_id"]),
                period_index=int(r["period_index"]),
                scanned_at=r["scanned_at"],
            )

    def insert(
        self,
        *,
        teacher_id: int,
        class_id: int,
        period_index: int,
        scanned_at: datetime,
    ) -> AttendanceRecord:
        # MySQL DATETIME keeps whole seconds.
        scanned_at = scanned_at.replace(microsecond=0)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(teacher_id, class_id, period_index, scanned_at, scan_date)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(teacher_id), int(class_id), int(period_index), scanned_at, scanned_at.date()),
                )
                attendance_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            logger.info(
                "Concurrent duplicate scan rejected by unique key: teacher_id=%s class_id=%s period=%s",
                teacher_id,
                class_id,
                period_index,
            )
            raise ConflictError(
                "Attendance for this lesson period was already recorded today",
                code=ScanRejection.ALREADY_SCANNED.value,
            ) from e

        return AttendanceRecord(
            attendance_id=attendance_id,
            teacher_id=int(teacher_id),
            class_id=int(class_id),
            period_index=int(period_index),
            scanned_at=scanned_at,
        )

    def has_records(self, *, teacher_id: Optional[int] = None, class_id: Optional[int] = None) -> bool:
        if teacher_id is None and class_id is None:
            return False
        column, value = ("teacher_id", teacher_id) if teacher_id is not None else ("class_id", class_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT 1 AS found FROM attendance_records WHERE {column}=%s LIMIT 1", (int(value),))
            return fetchone(cur) is not None

    def list_for_teacher(self, *, teacher_id: int, limit: int) -> Sequence[AttendanceReportRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _REPORT_SELECT
                + """
                WHERE ar.teacher_id=%s
                ORDER BY ar.scanned_at DESC
                LIMIT %s
                """,
                (int(teacher_id), int(limit)),
            )
            return [_to_report_row(r) for r in fetchall(cur)]

    def get_report_rows(
        self,
        *,
        day: Optional[date] = None,
        teacher_id: Optional[int] = None,
        class_id: Optional[int] = None,
        period_index: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["1=1"]
        params: list[object] = []

        if day is not None:
            day_range = DayRange.containing(datetime.combine(day, datetime.min.time()))
            clauses.append("ar.scanned_at BETWEEN %s AND %s")
            params.extend([day_range.start, day_range.end])
        if teacher_id is not None:
            clauses.append("ar.teacher_id=%s")
            params.append(int(teacher_id))
        if class_id is not None:
            clauses.append("ar.class_id=%s")
            params.append(int(class_id))
        if period_index is not None:
            clauses.append("ar.period_index=%s")
            params.append(int(period_index))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _REPORT_SELECT
                + f"""
                WHERE {where}
                ORDER BY ar.scanned_at DESC, ar.attendance_id DESC
                """,
                tuple(params),
            )
            return [_to_report_row(r) for r in fetchall(cur)]
