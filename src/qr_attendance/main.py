from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from .attendance.controller import register as register_attendance
from .config import get_settings_module
from .container import Container, build_container
from .courses.controller import register as register_courses
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DatabaseConnection, DBConfig
from .reports.controller import register as register_reports
from .sessions.controller import register as register_sessions
from .students.controller import register as register_students

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Pass a prebuilt `container` to run against other repositories (tests);
    otherwise MySQL repositories are wired from the active settings module.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        conn = DatabaseConnection(DBConfig.from_dict(db_config))
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            conn.config.user,
            conn.config.host,
            conn.config.port,
            conn.config.database,
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(conn)
            logger.info("Schema ready (tables=%s)", len(list_tables(conn)))
        container = build_container(conn, settings)

    app.extensions["qr_attendance"] = container

    register_courses(app, container)
    register_students(app, container)
    register_sessions(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    return app
