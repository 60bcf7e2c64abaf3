from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SchoolClass


class ClassRepository(Protocol):
    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def get_by_qr_token(self, qr_token: str) -> Optional[SchoolClass]:
        raise NotImplementedError

    def create(self, *, class_name: str, grade: str, major: Optional[str], qr_token: str) -> SchoolClass:
        raise NotImplementedError

    def delete(self, *, class_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[SchoolClass]:
        raise NotImplementedError
