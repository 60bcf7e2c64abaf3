from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.report import AttendanceReportService
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService, ScanValidator
from .audit.mysql_audit_repository import MySQLAuditRepository
from .audit.repository import AuditRepository
from .audit.service import AuditService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .common.datetime_utils import Clock, SystemClock
from .config import Settings
from .database.connection import DatabaseConnection
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository
from .teachers.service import TeacherService
from .users.identity import IdentityService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    clock: Clock

    users_repo: UserRepository
    teachers_repo: TeacherRepository
    classes_repo: ClassRepository
    schedules_repo: ScheduleRepository
    attendance_repo: AttendanceRepository
    audit_repo: AuditRepository

    audit_service: AuditService
    identity_service: IdentityService
    auth_service: AuthService
    user_service: UserService
    teacher_service: TeacherService
    class_service: ClassService
    schedule_service: ScheduleService
    scan_validator: ScanValidator
    attendance_service: AttendanceService
    report_service: AttendanceReportService

    conn: Optional[DatabaseConnection] = None


def assemble(
    *,
    clock: Clock,
    users_repo: UserRepository,
    teachers_repo: TeacherRepository,
    classes_repo: ClassRepository,
    schedules_repo: ScheduleRepository,
    attendance_repo: AttendanceRepository,
    audit_repo: AuditRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over the given repositories (MySQL in the app, fakes in tests)."""

    audit_service = AuditService(audit_repo, clock)
    identity_service = IdentityService(users_repo, teachers_repo)

    return Container(
        clock=clock,
        users_repo=users_repo,
        teachers_repo=teachers_repo,
        classes_repo=classes_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        audit_repo=audit_repo,
        audit_service=audit_service,
        identity_service=identity_service,
        auth_service=AuthService(users_repo, identity_service, audit_service),
        user_service=UserService(users_repo, teachers_repo, attendance_repo, audit_service),
        teacher_service=TeacherService(teachers_repo, users_repo, attendance_repo, audit_service),
        class_service=ClassService(classes_repo, attendance_repo, audit_service),
        schedule_service=ScheduleService(schedules_repo, teachers_repo, classes_repo, audit_service),
        scan_validator=ScanValidator(attendance_repo, classes_repo, schedules_repo, clock),
        attendance_service=AttendanceService(attendance_repo),
        report_service=AttendanceReportService(attendance_repo),
        conn=conn,
    )


def build_container(settings: Settings, *, clock: Optional[Clock] = None) -> Container:
    conn = DatabaseConnection(settings.db)
    return assemble(
        clock=clock or SystemClock(settings.school_timezone),
        users_repo=MySQLUserRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        audit_repo=MySQLAuditRepository(conn),
        conn=conn,
    )
