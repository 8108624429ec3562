from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from team_leave.core.logging import configure_logging, get_logger
from team_leave.database.bootstrap import apply_schema, list_tables
from team_leave.database.connection import DBConfig

logger = get_logger("scripts.init_db")


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    url = getattr(settings, "REMOTE_DB_URL", None)
    key = getattr(settings, "REMOTE_DB_KEY", None)
    if not url or not key:
        logger.error("LEAVE_DB_URL and LEAVE_DB_KEY must be set to provision the database")
        return 1

    config = DBConfig.from_url(url, key)
    schema_path = REPO_ROOT / "database" / "schema.sql"
    executed = apply_schema(config, schema_path=schema_path)
    tables = list_tables(config)
    logger.info("OK: applied %s (%d statements) -> %s (tables=%d)", schema_path.name, executed, config.describe(), len(tables))
    return 0


if __name__ == "__main__":
    sys.exit(main())
