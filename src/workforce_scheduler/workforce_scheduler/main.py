from __future__ import annotations

import importlib

import structlog
from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .core.constants import DEFAULT_TIMEZONE
from .database.bootstrap import apply_schema, list_tables
from .hours.controller import register as register_hours
from .logging import setup_logging
from .timeclock.controller import register as register_timeclock

log = structlog.get_logger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", None))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    log.info(
        "app_starting",
        settings=settings_module,
        db=f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        log.info("schema_ready", tables=len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        default_timezone=getattr(settings, "DEFAULT_TIMEZONE", DEFAULT_TIMEZONE),
    )

    register_timeclock(app, container)
    register_hours(app, container)

    return app
