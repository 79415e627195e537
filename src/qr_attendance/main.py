from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .employees.controller import register as register_employees
from .qrcodes.controller import register as register_qrcodes
from .reports.controller import register as register_reports

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), format=LOG_FORMAT)

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        storage = str(getattr(settings, "STORAGE", "mysql")).lower()
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s storage=%s", settings_module, storage)

        if storage == "mysql":
            logger.debug(
                "db=%s@%s:%s/%s",
                db_config.get("user"),
                db_config.get("host"),
                db_config.get("port", 3306),
                db_config.get("database"),
            )
            if bool(getattr(settings, "AUTO_INIT_DB", False)):
                apply_schema(db_config)
                logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
            if bool(getattr(settings, "AUTO_SEED_DB", False)):
                apply_seed_sql(db_config)
                logger.info("Demo seed ready")

        container = build_container(settings=settings)

    app.extensions["qr_attendance"] = container

    register_qrcodes(app, container)
    register_attendance(app, container)
    register_reports(app, container)
    register_employees(app, container)

    return app
