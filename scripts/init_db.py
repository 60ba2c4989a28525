"""Create the database (if missing) and apply database/schema.sql.

Usage: python scripts/init_db.py [settings.module]
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from dotenv import load_dotenv

from config import get_settings_module

from tutoring_center.database.bootstrap import apply_schema, list_tables
from tutoring_center.database.connection import DBConfig, DatabaseConnection
from tutoring_center.main import SCHEMA_PATH, configure_logging


def main(argv: list[str]) -> int:
    load_dotenv(override=False)
    settings_module = argv[0] if argv else get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    conn = DatabaseConnection(DBConfig.from_dict(settings.DB_CONFIG))
    statements = apply_schema(conn, schema_path=SCHEMA_PATH)
    cfg = conn.config
    tables = sorted(list_tables(conn))
    print(f"OK: {statements} statements -> {cfg.user}@{cfg.host}:{cfg.port}/{cfg.database}")
    print("Tables: " + ", ".join(tables))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
