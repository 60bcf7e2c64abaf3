from __future__ import annotations

import importlib
import os
from dataclasses import dataclass
from types import ModuleType
from typing import Optional

from ..core.constants import DEFAULT_SESSION_HOURS
from ..database.connection import DBConfig


def get_settings_module() -> str:
    # APP_ENV selects the settings module; anything unknown means development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return f"{__name__}.production"

    if env in {"test", "testing"}:
        return f"{__name__}.testing"

    return f"{__name__}.development"


@dataclass(frozen=True)
class Settings:
    """Everything the app needs at startup, passed explicitly to the container."""

    secret_key: str
    db: DBConfig
    debug: bool = False
    testing: bool = False
    auto_init_db: bool = False
    school_timezone: Optional[str] = None
    session_hours: int = DEFAULT_SESSION_HOURS


def settings_from_module(module: ModuleType) -> Settings:
    db_config = getattr(module, "DB_CONFIG")
    return Settings(
        secret_key=str(getattr(module, "SECRET_KEY")),
        db=DBConfig(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
            connect_timeout=int(db_config.get("connect_timeout", 10)),
        ),
        debug=bool(getattr(module, "DEBUG", False)),
        testing=bool(getattr(module, "TESTING", False)),
        auto_init_db=bool(getattr(module, "AUTO_INIT_DB", False)),
        school_timezone=getattr(module, "SCHOOL_TIMEZONE", None) or None,
        session_hours=int(getattr(module, "SESSION_HOURS", DEFAULT_SESSION_HOURS)),
    )


def load_settings(module_name: Optional[str] = None) -> Settings:
    return settings_from_module(importlib.import_module(module_name or get_settings_module()))
