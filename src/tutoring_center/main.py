from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from config import get_settings_module

from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level.upper())
        return
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_container(settings_module: Optional[str] = None) -> Container:
    """Load settings (+ .env), configure logging and wire the services."""

    load_dotenv(override=False)
    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(getattr(settings, "DB_CONFIG"))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        conn = DatabaseConnection(DBConfig.from_dict(db_config))
        apply_schema(conn, schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%d)", len(list_tables(conn)))

    return build_container(
        db_config=db_config,
        reactivation=getattr(settings, "ENROLLMENT_REACTIVATION", "reuse_row"),
    )
