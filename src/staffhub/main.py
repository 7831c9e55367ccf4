from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import Container, build_container
from .common.web import register_error_handlers
from .core.log import configure_logging
from .database.bootstrap import ensure_indexes
from .database.connection import DatabaseConnection, DBConfig
from .roster.controller import register as register_roster
from .shifts.controller import register as register_shifts
from .staff.controller import register as register_staff

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    ``container`` lets tests inject services backed by in-memory fakes; when
    omitted the Mongo-backed container is built from the settings module.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["ROSTER_DEFAULT_LIMIT"] = int(getattr(settings, "ROSTER_DEFAULT_LIMIT", 10))
    app.config["ROSTER_MAX_LIMIT"] = int(getattr(settings, "ROSTER_MAX_LIMIT", 100))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info("settings=%s db=%s", settings_module, db_config.get("database"))

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            conn = DatabaseConnection.get_instance(DBConfig(uri=db_config["uri"], database=db_config["database"]))
            ensure_indexes(conn.db)
        container = build_container(
            db_config=db_config,
            pin_reset_ttl_minutes=int(getattr(settings, "PIN_RESET_TTL_MINUTES", 30)),
        )

    register_error_handlers(app)
    register_roster(app, container)
    register_staff(app, container)
    register_shifts(app, container)

    return app
