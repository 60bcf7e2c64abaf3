from __future__ import annotations

import pytest

from teacher_attendance.core.enums import AuditAction, Role, TargetType
from teacher_attendance.core.exceptions import ConflictError, NotFoundError, ValidationError
from teacher_attendance.users.identity import AdminIdentity


@pytest.fixture
def admin(admin_user_id) -> AdminIdentity:
    return AdminIdentity(user_id=admin_user_id, username="admin")


def test_create_teacher_creates_account_and_profile(container, admin):
    teacher = container.teacher_service.create(
        actor=admin,
        full_name="  Siti Aminah ",
        username="siti",
        password="guru123",
        nip="1979",
        email="",
    )

    assert teacher.full_name == "Siti Aminah"
    assert teacher.email is None
    account = container.users_repo.get_by_id(teacher.user_id)
    assert account.role == Role.TEACHER
    assert account.device_id is None

    entry = container.audit_repo.entries[-1]
    assert (entry.action, entry.target_type, entry.target_id) == (AuditAction.CREATE, TargetType.TEACHER, teacher.teacher_id)


def test_create_teacher_rejects_taken_username(container, admin, teacher):
    with pytest.raises(ConflictError):
        container.teacher_service.create(actor=admin, full_name="Other", username="budi", password="guru123")


@pytest.mark.parametrize(
    "full_name, username, password",
    [("", "x1", "guru123"), ("Name", " ", "guru123"), ("Name", "x2", "123")],
)
def test_create_teacher_validates_input(container, admin, full_name, username, password):
    with pytest.raises(ValidationError):
        container.teacher_service.create(actor=admin, full_name=full_name, username=username, password=password)


def test_list_shows_username_and_device(container, admin, teacher):
    container.auth_service.authenticate("budi", "guru123", "device-A")

    rows = container.teacher_service.list_all()

    assert [(r.username, r.device_id) for r in rows] == [("budi", "device-A")]


def test_delete_teacher_removes_account(container, admin, teacher):
    container.teacher_service.delete(actor=admin, teacher_id=teacher.teacher_id)

    assert container.teachers_repo.get_by_id(teacher.teacher_id) is None
    assert container.users_repo.get_by_id(teacher.user_id) is None
    assert container.audit_repo.entries[-1].action == AuditAction.DELETE


def test_delete_or_reset_unknown_teacher_is_not_found(container, admin):
    with pytest.raises(NotFoundError):
        container.teacher_service.delete(actor=admin, teacher_id=99)
    with pytest.raises(NotFoundError):
        container.teacher_service.reset_device(actor=admin, teacher_id=99)


def test_reset_device_is_audited(container, admin, teacher):
    container.teacher_service.reset_device(actor=admin, teacher_id=teacher.teacher_id)

    entry = container.audit_repo.entries[-1]
    assert entry.action == AuditAction.RESET_DEVICE
    assert entry.actor_user_id == admin.user_id


def test_teacher_with_attendance_cannot_be_deleted(container, admin, teacher, school_class, monday_slot):
    container.scan_validator.scan(teacher_id=teacher.teacher_id, qr_token=school_class.qr_token, period_index=2)

    with pytest.raises(ConflictError):
        container.teacher_service.delete(actor=admin, teacher_id=teacher.teacher_id)

    assert container.users_repo.get_by_id(teacher.user_id) is not None
    history = container.attendance_service.history_for_teacher(teacher.teacher_id)
    assert [r.class_name for r in history] == ["IPA 1"]
