from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from teacher_attendance.attendance.model import AttendanceRecord, AttendanceReportRow
from teacher_attendance.audit.model import AuditEntry
from teacher_attendance.classes.model import SchoolClass
from teacher_attendance.config import Settings
from teacher_attendance.container import assemble
from teacher_attendance.core.enums import Role, ScanRejection, Weekday
from teacher_attendance.core.exceptions import ConflictError
from teacher_attendance.database.connection import DBConfig
from teacher_attendance.main import create_app
from teacher_attendance.schedules.model import ScheduleRow, ScheduleSlot
from teacher_attendance.teachers.model import Teacher, TeacherAdminRow
from teacher_attendance.users.model import User

# 2026-10-19 is a Monday.
MONDAY = date(2026, 10, 19)


class FixedClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def set(self, hour: int, minute: int, second: int = 0, *, day: date = MONDAY) -> None:
        self.current = datetime.combine(day, time(hour, minute, second))


class InMemoryUsers:
    def __init__(self):
        self.by_id: dict[int, User] = {}
        self._id = 0

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.by_id.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.username == username), None)

    def create_user(self, *, username: str, password_hash: str, role: Role) -> int:
        self._id += 1
        self.by_id[self._id] = User(user_id=self._id, username=username, password_hash=password_hash, role=role)
        return self._id

    def bind_device(self, *, user_id: int, device_id: str) -> bool:
        user = self.by_id.get(int(user_id))
        if not user or user.device_id:
            return False
        self.by_id[user.user_id] = replace(user, device_id=device_id)
        return True

    def reset_device(self, *, user_id: int) -> bool:
        user = self.by_id.get(int(user_id))
        if not user:
            return False
        self.by_id[user.user_id] = replace(user, device_id=None)
        return True

    def update_password(self, *, user_id: int, password_hash: str) -> bool:
        user = self.by_id.get(int(user_id))
        if not user:
            return False
        self.by_id[user.user_id] = replace(user, password_hash=password_hash)
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self.by_id.pop(int(user_id), None) is not None

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda u: (u.role.value, u.username))


class InMemoryTeachers:
    """Teachers whose account is gone are invisible (mirrors ON DELETE CASCADE)."""

    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._teachers: dict[int, Teacher] = {}
        self._id = 0

    def _alive(self, t: Teacher) -> bool:
        return self._users.get_by_id(t.user_id) is not None

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        t = self._teachers.get(int(teacher_id))
        return t if t and self._alive(t) else None

    def get_by_user_id(self, user_id: int) -> Optional[Teacher]:
        return next((t for t in self._teachers.values() if t.user_id == user_id and self._alive(t)), None)

    def create_with_account(self, *, username, password_hash, full_name, nip, email, phone) -> Teacher:
        if self._users.get_by_username(username):
            raise ConflictError("Username is already taken")
        user_id = self._users.create_user(username=username, password_hash=password_hash, role=Role.TEACHER)
        self._id += 1
        teacher = Teacher(
            teacher_id=self._id,
            user_id=user_id,
            full_name=full_name,
            nip=nip,
            email=email,
            phone=phone,
        )
        self._teachers[self._id] = teacher
        return teacher

    def list_admin_view(self):
        out = []
        for t in self._teachers.values():
            if not self._alive(t):
                continue
            u = self._users.get_by_id(t.user_id)
            out.append(
                TeacherAdminRow(
                    teacher_id=t.teacher_id,
                    user_id=t.user_id,
                    full_name=t.full_name,
                    nip=t.nip,
                    email=t.email,
                    phone=t.phone,
                    username=u.username,
                    device_id=u.device_id,
                )
            )
        return out


class InMemoryClasses:
    def __init__(self):
        self.by_id: dict[int, SchoolClass] = {}
        self._id = 0

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        return self.by_id.get(int(class_id))

    def get_by_qr_token(self, qr_token: str) -> Optional[SchoolClass]:
        return next((c for c in self.by_id.values() if c.qr_token == qr_token), None)

    def create(self, *, class_name, grade, major, qr_token) -> SchoolClass:
        self._id += 1
        c = SchoolClass(class_id=self._id, class_name=class_name, grade=grade, major=major, qr_token=qr_token)
        self.by_id[self._id] = c
        return c

    def delete(self, *, class_id: int) -> bool:
        return self.by_id.pop(int(class_id), None) is not None

    def list_all(self):
        return list(self.by_id.values())


class InMemorySchedules:
    def __init__(self, teachers: InMemoryTeachers, classes: InMemoryClasses):
        self._teachers = teachers
        self._classes = classes
        self.by_id: dict[int, ScheduleSlot] = {}
        self._id = 0

    def find_slot(self, *, teacher_id, class_id, weekday, period_index) -> Optional[ScheduleSlot]:
        for s in self.by_id.values():
            if (s.teacher_id, s.class_id, s.weekday, s.period_index) == (teacher_id, class_id, weekday, period_index):
                return s
        return None

    def create(self, *, teacher_id, class_id, weekday, period_index, start_time, end_time, subject) -> ScheduleSlot:
        if self.find_slot(teacher_id=teacher_id, class_id=class_id, weekday=weekday, period_index=period_index):
            raise ConflictError("duplicate slot")
        self._id += 1
        slot = ScheduleSlot(
            schedule_id=self._id,
            teacher_id=teacher_id,
            class_id=class_id,
            weekday=weekday,
            period_index=period_index,
            start_time=start_time,
            end_time=end_time,
            subject=subject,
        )
        self.by_id[self._id] = slot
        return slot

    def delete(self, *, schedule_id: int) -> bool:
        return self.by_id.pop(int(schedule_id), None) is not None

    def list_rows(self, *, teacher_id=None):
        rows = []
        for s in self.by_id.values():
            if teacher_id is not None and s.teacher_id != teacher_id:
                continue
            t = self._teachers.get_by_id(s.teacher_id)
            c = self._classes.get_by_id(s.class_id)
            rows.append(ScheduleRow(slot=s, teacher_name=t.full_name, teacher_nip=t.nip or "", class_label=c.label))
        return rows


class InMemoryAttendance:
    """Enforces one record per (teacher, class, period, day) like the unique key."""

    def __init__(self, teachers: InMemoryTeachers, classes: InMemoryClasses):
        self._teachers = teachers
        self._classes = classes
        self.records: list[AttendanceRecord] = []
        self.find_calls = 0

    def find_in_range(self, *, teacher_id, class_id, period_index, day_range) -> Optional[AttendanceRecord]:
        self.find_calls += 1
        for r in self.records:
            if (
                (r.teacher_id, r.class_id, r.period_index) == (teacher_id, class_id, period_index)
                and day_range.start <= r.scanned_at <= day_range.end
            ):
                return r
        return None

    def insert(self, *, teacher_id, class_id, period_index, scanned_at) -> AttendanceRecord:
        for r in self.records:
            if (r.teacher_id, r.class_id, r.period_index, r.scan_date) == (
                teacher_id,
                class_id,
                period_index,
                scanned_at.date(),
            ):
                raise ConflictError("duplicate", code=ScanRejection.ALREADY_SCANNED.value)
        rec = AttendanceRecord(
            attendance_id=len(self.records) + 1,
            teacher_id=teacher_id,
            class_id=class_id,
            period_index=period_index,
            scanned_at=scanned_at,
        )
        self.records.append(rec)
        return rec

    def _row(self, r: AttendanceRecord) -> AttendanceReportRow:
        t = self._teachers.get_by_id(r.teacher_id)
        c = self._classes.get_by_id(r.class_id)
        return AttendanceReportRow(
            attendance_id=r.attendance_id,
            teacher_id=r.teacher_id,
            teacher_name=t.full_name,
            teacher_nip=t.nip,
            class_id=r.class_id,
            class_name=c.class_name,
            grade=c.grade,
            major=c.major,
            period_index=r.period_index,
            scanned_at=r.scanned_at,
        )

    def has_records(self, *, teacher_id=None, class_id=None) -> bool:
        return any(
            (teacher_id is not None and r.teacher_id == teacher_id) or (class_id is not None and r.class_id == class_id)
            for r in self.records
        )

    def list_for_teacher(self, *, teacher_id, limit):
        items = sorted((r for r in self.records if r.teacher_id == teacher_id), key=lambda r: r.scanned_at, reverse=True)
        return [self._row(r) for r in items[:limit]]

    def get_report_rows(self, *, day=None, teacher_id=None, class_id=None, period_index=None):
        out = []
        for r in sorted(self.records, key=lambda r: r.scanned_at, reverse=True):
            if day is not None and r.scan_date != day:
                continue
            if teacher_id is not None and r.teacher_id != teacher_id:
                continue
            if class_id is not None and r.class_id != class_id:
                continue
            if period_index is not None and r.period_index != period_index:
                continue
            out.append(self._row(r))
        return out


class InMemoryAudit:
    def __init__(self):
        self.entries: list[AuditEntry] = []

    def append(self, *, actor_user_id, action, target_type, target_id, detail, created_at) -> int:
        entry = AuditEntry(
            audit_id=len(self.entries) + 1,
            actor_user_id=actor_user_id,
            action=action,
            target_type=target_type,
            target_id=target_id,
            detail=detail,
            created_at=created_at,
        )
        self.entries.append(entry)
        return entry.audit_id

    def list_recent(self, *, limit: int):
        return list(reversed(self.entries))[:limit]


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime.combine(MONDAY, time(8, 10)))


@pytest.fixture
def container(clock):
    users = InMemoryUsers()
    teachers = InMemoryTeachers(users)
    classes = InMemoryClasses()
    return assemble(
        clock=clock,
        users_repo=users,
        teachers_repo=teachers,
        classes_repo=classes,
        schedules_repo=InMemorySchedules(teachers, classes),
        attendance_repo=InMemoryAttendance(teachers, classes),
        audit_repo=InMemoryAudit(),
    )


@pytest.fixture
def admin_user_id(container) -> int:
    return container.users_repo.create_user(
        username="admin",
        password_hash=generate_password_hash("admin123"),
        role=Role.ADMIN,
    )


@pytest.fixture
def teacher(container) -> Teacher:
    return container.teachers_repo.create_with_account(
        username="budi",
        password_hash=generate_password_hash("guru123"),
        full_name="Budi Santoso",
        nip="198001012005011001",
        email="budi@example.sch.id",
        phone=None,
    )


@pytest.fixture
def school_class(container) -> SchoolClass:
    return container.classes_repo.create(class_name="IPA 1", grade="X", major="IPA", qr_token="a" * 32)


@pytest.fixture
def monday_slot(container, teacher, school_class) -> ScheduleSlot:
    """Period 2, Monday 08:00-08:45."""
    return container.schedules_repo.create(
        teacher_id=teacher.teacher_id,
        class_id=school_class.class_id,
        weekday=Weekday.MONDAY,
        period_index=2,
        start_time=time(8, 0),
        end_time=time(8, 45),
        subject="Matematika",
    )


@pytest.fixture
def app(container):
    settings = Settings(
        secret_key="test-secret",
        db=DBConfig(host="localhost", port=3306, user="root", password="", database="unused"),
        testing=True,
    )
    return create_app(settings, container=container)


@pytest.fixture
def client(app):
    return app.test_client()
