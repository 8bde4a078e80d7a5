from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.club_portal.club_portal.core.logging_config import configure_logging
from src.club_portal.club_portal.database.bootstrap import apply_seed_sql, ensure_demo_admin

logger = logging.getLogger("scripts.seed_db")


def main() -> None:
    configure_logging("INFO", source="club-portal:seed-db")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    seed_path = REPO_ROOT / "database" / "seed.sql"
    apply_seed_sql(db_config, seed_path=seed_path)

    email = getattr(settings, "DEMO_ADMIN_EMAIL", "")
    password = getattr(settings, "DEMO_ADMIN_PASSWORD", "")
    if email and password:
        ensure_demo_admin(db_config, email=email, password=password)
    else:
        logger.warning("DEMO_ADMIN_EMAIL/DEMO_ADMIN_PASSWORD not set; skipping demo admin")

    logger.info(
        "Seeded database -> %s@%s:%s/%s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )


if __name__ == "__main__":
    main()
