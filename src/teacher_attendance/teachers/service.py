from __future__ import annotations

from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..attendance.repository import AttendanceRepository
from ..audit.service import AuditService
from ..common.validators import optional_str, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import AuditAction, TargetType
from ..core.exceptions import ConflictError, NotFoundError
from ..users.identity import AdminIdentity
from ..users.repository import UserRepository
from .model import Teacher, TeacherAdminRow
from .repository import TeacherRepository


class TeacherService:
    """Use case: manage teachers (admin)."""

    def __init__(
        self,
        teachers: TeacherRepository,
        users: UserRepository,
        attendance: AttendanceRepository,
        audit: AuditService,
    ):
        self._teachers = teachers
        self._users = users
        self._attendance = attendance
        self._audit = audit

    def _require(self, teacher_id: int) -> Teacher:
        teacher = self._teachers.get_by_id(int(teacher_id))
        if not teacher:
            raise NotFoundError("Teacher not found")
        return teacher

    def list_all(self) -> Sequence[TeacherAdminRow]:
        return self._teachers.list_admin_view()

    def create(
        self,
        *,
        actor: AdminIdentity,
        full_name: str,
        username: str,
        password: str,
        nip: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Teacher:
        full_name = require_non_empty(full_name, "Name")
        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_username(username):
            raise ConflictError("Username is already taken")

        teacher = self._teachers.create_with_account(
            username=username,
            password_hash=generate_password_hash(password),
            full_name=full_name,
            nip=optional_str(nip),
            email=optional_str(email),
            phone=optional_str(phone),
        )
        self._audit.record(
            actor_user_id=actor.user_id,
            action=AuditAction.CREATE,
            target_type=TargetType.TEACHER,
            target_id=teacher.teacher_id,
            detail=f"Teacher created: {full_name}",
        )
        return teacher

    def delete(self, *, actor: AdminIdentity, teacher_id: int) -> None:
        teacher = self._require(teacher_id)
        if self._attendance.has_records(teacher_id=teacher.teacher_id):
            raise ConflictError("Teacher has attendance records and cannot be deleted")

        # Profile and schedules go with the account (ON DELETE CASCADE).
        self._users.delete_by_id(teacher.user_id)
        self._audit.record(
            actor_user_id=actor.user_id,
            action=AuditAction.DELETE,
            target_type=TargetType.TEACHER,
            target_id=teacher.teacher_id,
            detail=f"Teacher deleted: {teacher.full_name}",
        )

    def reset_device(self, *, actor: AdminIdentity, teacher_id: int) -> None:
        teacher = self._require(teacher_id)

        self._users.reset_device(user_id=teacher.user_id)
        self._audit.record(
            actor_user_id=actor.user_id,
            action=AuditAction.RESET_DEVICE,
            target_type=TargetType.TEACHER,
            target_id=teacher.teacher_id,
            detail=f"Device reset for teacher: {teacher.full_name}",
        )
