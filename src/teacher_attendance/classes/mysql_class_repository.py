from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SchoolClass
from .repository import ClassRepository

_CLASS_COLUMNS = "class_id, class_name, grade, major, qr_token"


def _to_class(row: dict) -> SchoolClass:
    return SchoolClass(
        class_id=int(row["class_id"]),
        class_name=row["class_name"],
        grade=row["grade"],
        major=row.get("major"),
        qr_token=row["qr_token"],
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_CLASS_COLUMNS} FROM classes WHERE class_id=%s", (int(class_id),))
            row = fetchone(cur)
            return _to_class(row) if row else None

    def get_by_qr_token(self, qr_token: str) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_CLASS_COLUMNS} FROM classes WHERE qr_token=%s", (qr_token,))
            row = fetchone(cur)
            return _to_class(row) if row else None

    def create(self, *, class_name: str, grade: str, major: Optional[str], qr_token: str) -> SchoolClass:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO classes(class_name, grade, major, qr_token) VALUES(%s,%s,%s,%s)",
                (class_name, grade, major, qr_token),
            )
            class_id = int(cur.lastrowid)
        return SchoolClass(class_id=class_id, class_name=class_name, grade=grade, major=major, qr_token=qr_token)

    def delete(self, *, class_id: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM classes WHERE class_id=%s", (int(class_id),))
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as e:
            # fk_attendance_class is ON DELETE RESTRICT.
            raise ConflictError("Class has attendance records and cannot be deleted") from e

    def list_all(self) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_CLASS_COLUMNS} FROM classes ORDER BY grade ASC, class_name ASC")
            return [_to_class(r) for r in fetchall(cur)]
