from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.summit_attendance.summit_attendance.database.bootstrap import (
    apply_seed_sql,
    ensure_default_zones,
    ensure_demo_admin,
)
from src.summit_attendance.summit_attendance.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_default_zones(db_config)
    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_admin(db_config, email=settings.ADMIN_EMAIL, password=settings.ADMIN_PASSWORD)

    print(f"OK: Seeded database -> {DBConfig.from_dict(db_config).describe()} (admin={settings.ADMIN_EMAIL})")


if __name__ == "__main__":
    main()
