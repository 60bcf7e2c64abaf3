from __future__ import annotations

import pytest

from teacher_attendance.config import get_settings_module, load_settings
from teacher_attendance.database.bootstrap import SCHEMA_PATH, _iter_sql_statements


@pytest.mark.parametrize(
    "env, suffix",
    [("production", "production"), ("PROD", "production"), ("testing", "testing"), ("staging", "development")],
)
def test_app_env_selects_settings_module(monkeypatch, env, suffix):
    monkeypatch.setenv("APP_ENV", env)

    assert get_settings_module() == f"teacher_attendance.config.{suffix}"


def test_testing_settings(monkeypatch):
    monkeypatch.setenv("DB_NAME", "attendance_ci")

    settings = load_settings("teacher_attendance.config.testing")

    assert settings.testing is True
    assert settings.db.database == "attendance_ci"
    assert settings.school_timezone is None
    assert settings.session_hours == 24


def test_sql_splitter_skips_comments_and_keeps_quoted_semicolons():
    sql = "-- header\nCREATE TABLE a (x INT);\nINSERT INTO a VALUES (';');\n"

    assert list(_iter_sql_statements(sql)) == ["CREATE TABLE a (x INT)", "INSERT INTO a VALUES (';')"]


def test_bundled_schema_creates_every_table():
    statements = list(_iter_sql_statements(SCHEMA_PATH.read_text(encoding="utf-8")))

    created = {s.split()[5].strip("`") for s in statements if s.upper().startswith("CREATE TABLE IF NOT EXISTS")}
    assert created == {"users", "teachers", "classes", "schedules", "attendance_records", "audit_log"}
