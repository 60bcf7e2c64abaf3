from __future__ import annotations

from datetime import datetime, time, timedelta

import mysql.connector
import pytest

from teacher_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from teacher_attendance.classes.mysql_class_repository import MySQLClassRepository
from teacher_attendance.core.enums import ScanRejection
from teacher_attendance.core.exceptions import ConflictError, StoreError
from teacher_attendance.database.mysql_base import db_cursor, normalize_mysql_time
from teacher_attendance.users.mysql_user_repository import MySQLUserRepository


class FakeCursor:
    def __init__(self, error=None, row=None, lastrowid=1, rowcount=1):
        self.error = error
        self.row = row
        self.lastrowid = lastrowid
        self.rowcount = rowcount
        self.executed = []
        self.closed = False

    def execute(self, sql, params=()):
        self.executed.append((sql, params))
        if self.error is not None:
            raise self.error

    def fetchone(self):
        return self.row

    def fetchall(self):
        return [self.row] if self.row else []

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    """Stands in for DatabaseConnection: hands out one scripted connection."""

    def __init__(self, cursor: FakeCursor = None, connect_error=None):
        self.cursor = cursor or FakeCursor()
        self.conn = FakeConnection(self.cursor)
        self._connect_error = connect_error

    def connect(self, *, with_database=True):
        if self._connect_error is not None:
            raise self._connect_error
        return self.conn


def duplicate_key():
    return mysql.connector.IntegrityError(msg="Duplicate entry for key 'uq_attendance_once_per_day'", errno=1062)


def row_referenced():
    return mysql.connector.IntegrityError(msg="Cannot delete or update a parent row", errno=1451)


def test_insert_stores_scan_date_and_whole_seconds():
    factory = FakeConnFactory(FakeCursor(lastrowid=7))
    repo = MySQLAttendanceRepository(factory)

    record = repo.insert(teacher_id=1, class_id=2, period_index=3, scanned_at=datetime(2026, 10, 19, 8, 10, 5, 123456))

    assert record.attendance_id == 7
    assert record.scanned_at == datetime(2026, 10, 19, 8, 10, 5)
    _, params = factory.cursor.executed[0]
    assert params[-1] == datetime(2026, 10, 19).date()
    assert factory.conn.committed and factory.conn.closed


def test_insert_unique_key_violation_is_already_scanned():
    factory = FakeConnFactory(FakeCursor(error=duplicate_key()))
    repo = MySQLAttendanceRepository(factory)

    with pytest.raises(ConflictError) as exc:
        repo.insert(teacher_id=1, class_id=2, period_index=3, scanned_at=datetime(2026, 10, 19, 8, 10))

    assert exc.value.code == ScanRejection.ALREADY_SCANNED.value
    assert factory.conn.rolled_back
    assert not factory.conn.committed
    assert factory.conn.closed and factory.cursor.closed


def test_driver_error_becomes_store_error_and_rolls_back():
    factory = FakeConnFactory(FakeCursor(error=mysql.connector.OperationalError(msg="Lost connection", errno=2013)))

    with pytest.raises(StoreError) as exc:
        with db_cursor(factory) as (_, cur):
            cur.execute("SELECT 1")

    assert "Lost connection" not in exc.value.message
    assert factory.conn.rolled_back and factory.conn.closed


def test_unreachable_database_is_store_error():
    factory = FakeConnFactory(connect_error=mysql.connector.InterfaceError(msg="Can't connect", errno=2003))

    with pytest.raises(StoreError):
        MySQLClassRepository(factory).get_by_qr_token("a" * 32)


def test_domain_errors_inside_transaction_roll_back_unchanged():
    factory = FakeConnFactory()

    with pytest.raises(ConflictError):
        with db_cursor(factory):
            raise ConflictError("nope")

    assert factory.conn.rolled_back and not factory.conn.committed


def test_deleting_class_with_attendance_is_conflict():
    factory = FakeConnFactory(FakeCursor(error=row_referenced()))

    with pytest.raises(ConflictError):
        MySQLClassRepository(factory).delete(class_id=3)

    assert factory.conn.rolled_back


def test_deleting_account_with_attendance_is_conflict():
    factory = FakeConnFactory(FakeCursor(error=row_referenced()))

    with pytest.raises(ConflictError):
        MySQLUserRepository(factory).delete_by_id(5)

    assert factory.conn.rolled_back


def test_has_records_queries_by_class():
    factory = FakeConnFactory(FakeCursor(row={"found": 1}))
    repo = MySQLAttendanceRepository(factory)

    assert repo.has_records(class_id=3) is True
    sql, params = factory.cursor.executed[0]
    assert "class_id=%s" in sql and params == (3,)
    assert repo.has_records() is False


@pytest.mark.parametrize(
    "raw, expected",
    [(timedelta(hours=8, minutes=45, seconds=30), time(8, 45)), ("07:30:00", time(7, 30)), (time(9, 0), time(9, 0)), (None, None)],
)
def test_normalize_mysql_time(raw, expected):
    assert normalize_mysql_time(raw) == expected
