from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..teachers.repository import TeacherRepository
from .repository import UserRepository


@dataclass(frozen=True)
class AdminIdentity:
    user_id: int
    username: str

    role = Role.ADMIN


@dataclass(frozen=True)
class TeacherIdentity:
    user_id: int
    username: str
    teacher_id: int
    teacher_name: str

    role = Role.TEACHER


Identity = Union[AdminIdentity, TeacherIdentity]


def identity_to_dict(identity: Identity) -> dict:
    out = {"userId": identity.user_id, "username": identity.username, "role": identity.role.value}
    if isinstance(identity, TeacherIdentity):
        out["teacher"] = {"id": identity.teacher_id, "name": identity.teacher_name}
    return out


class IdentityService:
    """Resolve a session's account id into a caller identity."""

    def __init__(self, users: UserRepository, teachers: TeacherRepository):
        self._users = users
        self._teachers = teachers

    def resolve(self, user_id: int) -> Identity:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise AuthenticationError("Account no longer exists")

        if user.role == Role.ADMIN:
            return AdminIdentity(user_id=user.user_id, username=user.username)

        teacher = self._teachers.get_by_user_id(user.user_id)
        if not teacher:
            raise AuthenticationError("Teacher profile not found for this account")
        return TeacherIdentity(
            user_id=user.user_id,
            username=user.username,
            teacher_id=teacher.teacher_id,
            teacher_name=teacher.full_name,
        )
