from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .closeout.controller import register as register_closeout
from .closeout.scheduler import start_closeout_scheduler
from .common.datetime_utils import parse_time_of_day
from .common.log import configure_logging
from .container import Container, build_container
from .core.constants import DEFAULT_CLOSEOUT_TIME, DEFAULT_NOTIFY_WORKERS, PAIRING_TIMEOUT_SECONDS
from .database.bootstrap import apply_schema, list_tables
from .pairing.controller import register as register_pairing
from .requests.controller import register as register_requests

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app. A prebuilt container skips all database setup."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            pairing_timeout_seconds=int(getattr(settings, "PAIRING_TIMEOUT_SECONDS", PAIRING_TIMEOUT_SECONDS)),
            closeout_mark_absent=bool(getattr(settings, "CLOSEOUT_MARK_ABSENT", True)),
            notify_workers=int(getattr(settings, "NOTIFY_WORKERS", DEFAULT_NOTIFY_WORKERS)),
        )

        if bool(getattr(settings, "SCHEDULER_ENABLED", False)):
            closeout_at = getattr(settings, "CLOSEOUT_TIME", None)
            at = parse_time_of_day(closeout_at) if closeout_at else DEFAULT_CLOSEOUT_TIME
            app.extensions["closeout_scheduler"] = start_closeout_scheduler(container.closeout, at=at)

    app.extensions["attendance_engine"] = container

    register_pairing(app, container)
    register_attendance(app, container)
    register_requests(app, container)
    register_closeout(app, container)

    return app
