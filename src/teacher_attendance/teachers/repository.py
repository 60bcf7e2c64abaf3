from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Teacher, TeacherAdminRow


class TeacherRepository(Protocol):
    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Teacher]:
        raise NotImplementedError

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
        """Create the teacher account and profile in one transaction."""

        raise NotImplementedError

    def list_admin_view(self) -> Sequence[TeacherAdminRow]:
        raise NotImplementedError
