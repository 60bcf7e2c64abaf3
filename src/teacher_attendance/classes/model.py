from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SchoolClass:
    """Domain entity: a class (group of students) with its scan token.

    ``qr_token`` is opaque, generated once at creation and never changed.
    """

    class_id: int
    class_name: str
    grade: str
    major: Optional[str]
    qr_token: str

    @property
    def label(self) -> str:
        return f"{self.grade} {self.class_name}"
