from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_engine.attendance_engine.database.bootstrap import apply_schema, list_tables
from src.attendance_engine.attendance_engine.database.connection import DBConfig
from src.attendance_engine.attendance_engine.main import SCHEMA_PATH, configure_logging

logger = logging.getLogger("init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=SCHEMA_PATH)
    tables = list_tables(db_config)
    logger.info("Schema applied to %s (tables=%d)", DBConfig.from_dict(db_config).describe(), len(tables))


if __name__ == "__main__":
    main()
