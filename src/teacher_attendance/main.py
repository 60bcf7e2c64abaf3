from __future__ import annotations

from typing import Optional

import click
from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .audit.controller import register as register_audit
from .classes.controller import register as register_classes
from .config import Settings, get_settings_module, load_settings
from .container import Container, build_container
from .core.exceptions import ValidationError
from .database.bootstrap import apply_schema, list_tables
from .schedules.controller import register as register_schedules
from .teachers.controller import register as register_teachers
from .users.controller import register as register_users
from .web import EXTENSION_KEY, register_error_handlers


def create_app(settings: Optional[Settings] = None, *, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings = settings or load_settings()
    app.secret_key = settings.secret_key
    app.config["DEBUG"] = settings.debug
    app.config["TESTING"] = settings.testing

    if settings.debug:
        app.logger.setLevel("INFO")
        db = settings.db
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s", get_settings_module(), db.user, db.host, db.port, db.database
        )

    if container is None:
        container = build_container(settings)
        if settings.auto_init_db:
            apply_schema(container.conn)
            app.logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))

    app.extensions[EXTENSION_KEY] = container
    register_error_handlers(app)

    register_users(app, container, session_hours=settings.session_hours)
    register_teachers(app, container)
    register_classes(app, container)
    register_schedules(app, container)
    register_attendance(app, container)
    register_audit(app, container)

    @app.cli.command("init-db")
    def init_db_command():
        """Create the database and tables (idempotent)."""
        if container.conn is None:
            raise click.ClickException("No database configured")
        apply_schema(container.conn)
        click.echo(f"Schema ready: {', '.join(sorted(list_tables(container.conn)))}")

    @app.cli.command("create-admin")
    @click.option("--username", default="admin", show_default=True)
    @click.password_option()
    def create_admin_command(username: str, password: str):
        """Create the first administrator account."""
        try:
            created = container.auth_service.ensure_admin(username=username, password=password)
        except ValidationError as e:
            raise click.ClickException(e.message) from e
        click.echo(f"Admin '{username}' " + ("created" if created else "already exists"))

    return app
