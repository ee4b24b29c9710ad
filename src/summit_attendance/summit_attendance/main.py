from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .attendees.controller import register as register_attendees
from .certificates.controller import register as register_certificates
from .common.logging_config import setup_logging
from .container import Container, build_container
from .core.constants import DEFAULT_AUTO_CHECKIN_DELAY_SECONDS, DEFAULT_REFRESH_INTERVAL_SECONDS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_default_zones, ensure_demo_admin, list_tables
from .feedback.controller import register as register_feedback
from .schedules.controller import register as register_schedules
from .users.controller import register as register_users
from .zones.controller import register as register_zones

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory. Pass ``container`` to run over prepared services (tests)."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(level=getattr(settings, "LOG_LEVEL", "INFO"), log_file=getattr(settings, "LOG_FILE", None))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["QR_TOKEN"] = getattr(settings, "QR_TOKEN", "SUMMIT_CHECKIN")
    app.config["REFRESH_INTERVAL_SECONDS"] = int(
        getattr(settings, "REFRESH_INTERVAL_SECONDS", DEFAULT_REFRESH_INTERVAL_SECONDS)
    )

    if container is None:
        logger.info("Starting with settings=%s", settings_module)

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            ensure_default_zones(db_config)
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_admin(
                db_config,
                email=getattr(settings, "ADMIN_EMAIL"),
                password=getattr(settings, "ADMIN_PASSWORD"),
            )
            logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            auto_checkin_delay=float(
                getattr(settings, "AUTO_CHECKIN_DELAY_SECONDS", DEFAULT_AUTO_CHECKIN_DELAY_SECONDS)
            ),
        )

    app.extensions["summit_container"] = container

    register_users(app, container)
    register_zones(app, container)
    register_schedules(app, container)
    register_attendees(app, container)
    register_attendance(app, container)
    register_feedback(app, container)
    register_certificates(app, container)

    return app
