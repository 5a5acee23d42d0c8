from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_mail import Mail
from werkzeug.exceptions import HTTPException

from .settings import get_settings_module

from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_default_admin, list_tables
from .notifications.mailer import ConfirmationMailer

from .container import Container, build_container
from .activity.controller import register as register_activity
from .admins.controller import register as register_admins
from .app_config.controller import register as register_config
from .attendance.controller import register as register_attendance
from .candidates.controller import register as register_candidates
from .members.controller import register as register_members
from .positions.controller import register as register_positions
from .reports.controller import register as register_reports
from .voting.controller import register as register_voting

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"

logger = logging.getLogger(__name__)

MAIL_KEYS = (
    "MAIL_SERVER",
    "MAIL_PORT",
    "MAIL_USE_TLS",
    "MAIL_USE_SSL",
    "MAIL_USERNAME",
    "MAIL_PASSWORD",
    "MAIL_DEFAULT_SENDER",
    "MAIL_SUPPRESS_SEND",
)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"success": False, "error": str(e)}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        if not request.path.startswith("/api/"):
            return e
        return jsonify({"success": False, "error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "error": "Error interno del servidor"}), 500


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["APP_URL"] = getattr(settings, "APP_URL", "http://localhost:5000")
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(hours=int(getattr(settings, "SESSION_HOURS", 8)))
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_SECURE"] = not app.config["DEBUG"] and not app.config["TESTING"]
    for key in MAIL_KEYS:
        if hasattr(settings, key):
            app.config[key] = getattr(settings, key)

    mail = Mail(app)

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_default_admin(
                db_config,
                username=getattr(settings, "DEFAULT_ADMIN_USERNAME", "admin"),
                password=getattr(settings, "DEFAULT_ADMIN_PASSWORD", "admin12345"),
            )
            logger.info("Demo seed ready")

        mailer = ConfirmationMailer(
            mail,
            app_url=app.config["APP_URL"],
            assembly_name=getattr(settings, "ASSEMBLY_NAME", "COOPVOTE"),
        )
        container = build_container(db_config=db_config, mailer=mailer)

    app.extensions["coopvote"] = container

    register_admins(app, container)
    register_members(app, container)
    register_attendance(app, container)
    register_positions(app, container)
    register_candidates(app, container)
    register_voting(app, container)
    register_reports(app, container)
    register_config(app, container)
    register_activity(app, container)

    _register_error_handlers(app)

    return app
