from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .common.web import fail
from .core.constants import RECONCILIATION_TTL_MINUTES
from .core.logging_config import configure_logging
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_admin, list_tables

from .container import Container, build_container
from .analytics.controller import register as register_analytics
from .attendance.controller import register as register_attendance
from .audit.controller import register as register_audit
from .content.controller import register as register_content
from .directory.controller import register as register_directory
from .events.controller import register as register_events
from .members.controller import register as register_members

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _prepare_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        email = getattr(settings, "DEMO_ADMIN_EMAIL", "")
        password = getattr(settings, "DEMO_ADMIN_PASSWORD", "")
        if email and password:
            ensure_demo_admin(db_config, email=email, password=password)
        logger.info("Demo seed ready")


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Passing a container skips all database setup, which is how the tests
    run the app over in-memory repositories.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_UPLOAD_BYTES", 2 * 1024 * 1024))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _prepare_database(settings, db_config)
        ttl_minutes = int(getattr(settings, "RECONCILIATION_TTL_MINUTES", RECONCILIATION_TTL_MINUTES))
        container = build_container(db_config=db_config, session_ttl=timedelta(minutes=ttl_minutes))

    register_members(app, container)
    register_events(app, container)
    register_attendance(app, container)
    register_directory(app, container)
    register_analytics(app, container)
    register_audit(app, container)
    register_content(app, container)

    @app.errorhandler(404)
    def not_found(_e):
        return fail("Not found", 404)

    @app.errorhandler(413)
    def too_large(_e):
        return fail("The uploaded file is too large", 413)

    @app.errorhandler(Exception)
    def unhandled(e):
        if isinstance(e, HTTPException):
            return fail(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error")
        return fail("Internal server error", 500)

    return app
