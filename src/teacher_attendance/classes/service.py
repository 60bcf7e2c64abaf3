from __future__ import annotations

import io
import secrets
from typing import Callable, Optional, Sequence

import qrcode

from ..attendance.repository import AttendanceRepository
from ..audit.service import AuditService
from ..common.validators import optional_str, require_non_empty
from ..core.constants import QR_TOKEN_BYTES
from ..core.enums import AuditAction, TargetType
from ..core.exceptions import ConflictError, NotFoundError
from ..users.identity import AdminIdentity
from .model import SchoolClass
from .repository import ClassRepository


def new_qr_token() -> str:
    return secrets.token_hex(QR_TOKEN_BYTES)


def render_qr_png(data: str) -> bytes:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class ClassService:
    def __init__(
        self,
        classes: ClassRepository,
        attendance: AttendanceRepository,
        audit: AuditService,
        *,
        token_factory: Callable[[], str] = new_qr_token,
    ):
        self._classes = classes
        self._attendance = attendance
        self._audit = audit
        self._token_factory = token_factory

    def list_all(self) -> Sequence[SchoolClass]:
        return self._classes.list_all()

    def get(self, class_id: int) -> SchoolClass:
        school_class = self._classes.get_by_id(int(class_id))
        if not school_class:
            raise NotFoundError("Class not found")
        return school_class

    def create(
        self,
        *,
        actor: AdminIdentity,
        class_name: str,
        grade: str,
        major: Optional[str] = None,
    ) -> SchoolClass:
        school_class = self._classes.create(
            class_name=require_non_empty(class_name, "Class name"),
            grade=require_non_empty(grade, "Grade"),
            major=optional_str(major),
            qr_token=self._token_factory(),
        )
        self._audit.record(
            actor_user_id=actor.user_id,
            action=AuditAction.CREATE,
            target_type=TargetType.CLASS,
            target_id=school_class.class_id,
            detail=f"Class created: {school_class.label}",
        )
        return school_class

    def delete(self, *, actor: AdminIdentity, class_id: int) -> None:
        school_class = self.get(class_id)
        if self._attendance.has_records(class_id=school_class.class_id):
            raise ConflictError("Class has attendance records and cannot be deleted")

        # Schedule slots go with the class (ON DELETE CASCADE).
        self._classes.delete(class_id=school_class.class_id)
        self._audit.record(
            actor_user_id=actor.user_id,
            action=AuditAction.DELETE,
            target_type=TargetType.CLASS,
            target_id=school_class.class_id,
            detail=f"Class deleted: {school_class.label}",
        )

    def qr_png(self, class_id: int) -> bytes:
        return render_qr_png(self.get(class_id).qr_token)
