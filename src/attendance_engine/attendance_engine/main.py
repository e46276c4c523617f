from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import fail
from .container import Container, build_container
from .core.constants import DEFAULT_RECALC_WINDOW_DAYS, DEFAULT_REPORT_MAX_WORKERS
from .core.exceptions import DomainError, NotFoundError, ValidationError
from .database.bootstrap import apply_schema, list_tables
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules
from .workcalendar.controller import register as register_calendar

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
SCHEMA_PATH = Path(__file__).resolve().parent / "database" / "schema.sql"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        return fail(str(e), 400)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return fail(str(e), 404)

    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        return fail(str(e), 400)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return fail(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error")
        return fail("Internal server error", 500)


def create_app(container: Optional[Container] = None) -> Flask:
    """Flask application factory.

    Pass a ready `container` (e.g. wired over in-memory repositories) to skip
    the database setup entirely.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("Starting with settings=%s", settings_module)

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            recalc_window_days=int(getattr(settings, "RECALC_WINDOW_DAYS", DEFAULT_RECALC_WINDOW_DAYS)),
            report_max_workers=int(getattr(settings, "REPORT_MAX_WORKERS", DEFAULT_REPORT_MAX_WORKERS)),
        )

    app.extensions["attendance_engine"] = container
    _register_error_handlers(app)

    register_attendance(app, container)
    register_reports(app, container)
    register_schedules(app, container)
    register_calendar(app, container)

    return app
