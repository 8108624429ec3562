from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .api.controller import register as register_api
from .container import Container, build_container
from .core.logging import configure_logging, get_logger
from .database.bootstrap import apply_schema, list_tables
from .database.connection import InvalidRemoteBackend, RemoteBackend

logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        container = build_container(
            remote_url=getattr(settings, "REMOTE_DB_URL", None),
            remote_key=getattr(settings, "REMOTE_DB_KEY", None),
            local_storage_dir=getattr(settings, "LOCAL_STORAGE_DIR", None),
            probe_timeout=float(getattr(settings, "PROBE_TIMEOUT_SECONDS", 10)),
        )

    backend = container.backend
    if isinstance(backend, RemoteBackend):
        logger.info("settings=%s db=%s", settings_module, backend.conn.config.describe())
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            # Provisioning errors are logged only; the prober decides the mode.
            try:
                apply_schema(backend.conn.config, schema_path=SCHEMA_PATH)
                logger.info("schema ready (tables=%d)", len(list_tables(backend.conn.config)))
            except Exception:
                logger.exception("could not apply %s", SCHEMA_PATH.name)
    elif isinstance(backend, InvalidRemoteBackend):
        logger.warning("settings=%s db=<invalid: %s>", settings_module, backend.reason)
    else:
        logger.info("settings=%s db=<not configured>", settings_module)

    container.mediator.initialize()
    app.extensions["team_leave"] = container

    register_api(app, container)

    return app
