from __future__ import annotations

import atexit
import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .core.enums import StorageBackend
from .database.bootstrap import apply_schema, list_tables
from .reports.controller import register as register_reports
from .timesheets.controller import register as register_timesheets
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def load_settings(overrides: Optional[dict] = None) -> dict:
    module = importlib.import_module(get_settings_module())
    settings = {name: getattr(module, name) for name in dir(module) if name.isupper()}
    settings.update(overrides or {})
    return settings


def create_app(overrides: Optional[dict] = None) -> Flask:
    load_dotenv(override=False)
    settings = load_settings(overrides)

    logging.basicConfig(
        level=str(settings.get("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = settings["SECRET_KEY"]
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    backend = str(settings.get("STORAGE_BACKEND", StorageBackend.LOCAL.value)).lower()
    if backend == StorageBackend.MYSQL.value and settings.get("AUTO_INIT_DB"):
        apply_schema(settings["DB_CONFIG"], schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%d)", len(list_tables(settings["DB_CONFIG"])))

    container = build_container(settings, clock=settings.get("CLOCK"))
    app.extensions["timeclock"] = container
    atexit.register(container.close)

    register_users(app, container)
    register_timesheets(app, container)
    register_reports(app, container)

    logger.info("Time clock ready (backend=%s, zone=%s)", container.backend.value, container.timezone)
    return app
