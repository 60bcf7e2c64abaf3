from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..attendance.repository import AttendanceRepository
from ..audit.service import AuditService
from ..common.validators import optional_str, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import AuditAction, AuthRejection, Role, TargetType
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..teachers.repository import TeacherRepository
from .identity import AdminIdentity, Identity, IdentityService
from .model import User, UserAdminRow
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate (login) with teacher device binding."""

    def __init__(self, users: UserRepository, identities: IdentityService, audit: AuditService):
        self._users = users
        self._identities = identities
        self._audit = audit

    def _verify_password(self, user: Optional[User], password: str) -> bool:
        if not user:
            return False
        try:
            return check_password_hash(user.password_hash, password or "")
        except (TypeError, ValueError):
            # e.g. placeholder hashes or corrupted values
            return False

    def _check_device(self, user: User, device_id: Optional[str]) -> None:
        """Single-slot device binding: unset -> bound on first login -> reset by admin."""

        if user.role != Role.TEACHER:
            return

        device_id = optional_str(device_id)
        if user.device_id:
            if user.device_id != device_id:
                raise AuthorizationError(
                    "This account is bound to another device. Ask an administrator to reset it.",
                    code=AuthRejection.DEVICE_MISMATCH.value,
                )
            return

        if not device_id:
            raise ValidationError("Device id is required for teacher login")

        if not self._users.bind_device(user_id=user.user_id, device_id=device_id):
            # Another login bound a device between our read and the update.
            current = self._users.get_by_id(user.user_id)
            if not current or current.device_id != device_id:
                raise AuthorizationError(
                    "This account is bound to another device. Ask an administrator to reset it.",
                    code=AuthRejection.DEVICE_MISMATCH.value,
                )
            return
        logger.info("Bound device for user_id=%s", user.user_id)

    def authenticate(self, username: str, password: str, device_id: Optional[str] = None) -> Identity:
        user = self._users.get_by_username((username or "").strip())
        if not self._verify_password(user, password):
            raise AuthenticationError("Wrong username or password")

        # Resolve first so an account without a teacher profile never gets bound.
        identity = self._identities.resolve(user.user_id)
        self._check_device(user, device_id)

        self._audit.record(
            actor_user_id=user.user_id,
            action=AuditAction.LOGIN,
            target_type=TargetType.USER,
            target_id=user.user_id,
            detail=f"Login: {user.username}",
        )
        return identity

    def change_password(self, *, user_id: int, old_password: str, new_password: str) -> None:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise AuthenticationError("Account no longer exists")
        if not self._verify_password(user, old_password):
            raise AuthenticationError("Old password is wrong")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)

        self._users.update_password(user_id=user.user_id, password_hash=generate_password_hash(new_password))
        self._audit.record(
            actor_user_id=user.user_id,
            action=AuditAction.CHANGE_PASSWORD,
            target_type=TargetType.USER,
            target_id=user.user_id,
            detail="Password changed",
        )

    def ensure_admin(self, *, username: str, password: str) -> bool:
        """Create the first admin account. Returns False if the username exists."""

        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        if self._users.get_by_username(username):
            return False

        user_id = self._users.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            role=Role.ADMIN,
        )
        self._audit.record(
            actor_user_id=user_id,
            action=AuditAction.SIGNUP,
            target_type=TargetType.ADMIN,
            target_id=user_id,
            detail=f"Admin account created: {username}",
        )
        return True


class UserService:
    """Use case: list and delete login accounts (admin)."""

    def __init__(
        self,
        users: UserRepository,
        teachers: TeacherRepository,
        attendance: AttendanceRepository,
        audit: AuditService,
    ):
        self._users = users
        self._teachers = teachers
        self._attendance = attendance
        self._audit = audit

    def list_all(self) -> Sequence[UserAdminRow]:
        profiles = {t.user_id: t for t in self._teachers.list_admin_view()}
        rows = []
        for user in self._users.list_all():
            teacher = profiles.get(user.user_id)
            rows.append(
                UserAdminRow(
                    user_id=user.user_id,
                    username=user.username,
                    role=user.role,
                    device_id=user.device_id,
                    teacher_id=teacher.teacher_id if teacher else None,
                    teacher_name=teacher.full_name if teacher else None,
                    teacher_nip=teacher.nip if teacher else None,
                )
            )
        return rows

    def delete(self, *, actor: AdminIdentity, user_id: int) -> None:
        user_id = int(user_id)
        if user_id == actor.user_id:
            raise InvalidStateError("You cannot delete your own account")

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        teacher = self._teachers.get_by_user_id(user.user_id)
        if teacher and self._attendance.has_records(teacher_id=teacher.teacher_id):
            raise ConflictError("Account has attendance records and cannot be deleted")

        self._users.delete_by_id(user.user_id)
        self._audit.record(
            actor_user_id=actor.user_id,
            action=AuditAction.DELETE,
            target_type=TargetType.USER,
            target_id=user.user_id,
            detail=f"User deleted: {user.username}",
        )
