from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .common.http import error_response
from .container import Container, build_container
from .core.constants import DEFAULT_PORT, DEFAULT_SCAN_COOLDOWN_SECONDS, MAX_ALERT_HISTORY
from .database.bootstrap import apply_schema, list_tables
from .attendance.controller import register as register_attendance
from .health.controller import register as register_health
from .tracking.controller import register as register_tracking

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return error_response(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        return error_response("Internal server error", 500)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["HOST"] = getattr(settings, "HOST", "0.0.0.0")
    app.config["PORT"] = int(getattr(settings, "PORT", DEFAULT_PORT))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    CORS(app, resources={r"/api/*": {"origins": getattr(settings, "CORS_ORIGINS", "*")}})

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            scan_cooldown_seconds=int(getattr(settings, "SCAN_COOLDOWN_SECONDS", DEFAULT_SCAN_COOLDOWN_SECONDS)),
            alert_history_limit=int(getattr(settings, "ALERT_HISTORY_LIMIT", MAX_ALERT_HISTORY)),
        )

    app.extensions["field_telemetry"] = container

    register_health(app, container)
    register_attendance(app, container)
    register_tracking(app, container)
    _register_error_handlers(app)

    return app


def run() -> None:
    app = create_app()
    logger.info("Backend server running on http://%s:%s", app.config["HOST"], app.config["PORT"])
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])


if __name__ == "__main__":
    run()
