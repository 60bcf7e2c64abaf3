from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Teacher, TeacherAdminRow
from .repository import TeacherRepository

_TEACHER_COLUMNS = "teacher_id, user_id, full_name, nip, email, phone"


def _to_teacher(row: dict) -> Teacher:
    return Teacher(
        teacher_id=int(row["teacher_id"]),
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        nip=row.get("nip"),
        email=row.get("email"),
        phone=row.get("phone"),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TEACHER_COLUMNS} FROM teachers WHERE teacher_id=%s", (int(teacher_id),))
            row = fetchone(cur)
            return _to_teacher(row) if row else None

    def get_by_user_id(self, user_id: int) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TEACHER_COLUMNS} FROM teachers WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_teacher(row) if row else None

    def create_with_account(
        self,
        *,
        username: str,
        password_hash: str,
        full_name: str,
        nip: Optional[str],
        email: Optional[str],
        phone: Optional[str],
    ) -> Teacher:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO users(username, password_hash, role) VALUES(%s,%s,%s)",
                    (username, password_hash, Role.TEACHER.value),
                )
                user_id = int(cur.lastrowid)
                cur.execute(
                    """
                    INSERT INTO teachers(user_id, full_name, nip, email, phone)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (user_id, full_name, nip, email, phone),
                )
                teacher_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            raise ConflictError("Username is already taken") from e

        return Teacher(
            teacher_id=teacher_id,
            user_id=user_id,
            full_name=full_name,
            nip=nip,
            email=email,
            phone=phone,
        )

    def list_admin_view(self) -> Sequence[TeacherAdminRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT t.teacher_id, t.user_id, t.full_name, t.nip, t.email, t.phone,
                       u.username, u.device_id
                FROM teachers t
                JOIN users u ON u.user_id = t.user_id
                ORDER BY t.full_name ASC
                """
            )
            return [
                TeacherAdminRow(
                    teacher_id=int(r["teacher_id"]),
                    user_id=int(r["user_id"]),
                    full_name=r["full_name"],
                    nip=r.get("nip"),
                    email=r.get("email"),
                    phone=r.get("phone"),
                    username=r["username"],
                    device_id=r.get("device_id") or None,
                )
                for r in fetchall(cur)
            ]
