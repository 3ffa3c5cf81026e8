"""
Run bootstrap seeding (modules, roles, default admin, default permission matrix).
Run from project root:
  python -m app.scripts.seed
Safe to re-run; only missing rows are created.
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.repositories.sql import SqlUnitOfWork
from app.services.bootstrap import seed_defaults

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    db = SessionLocal()
    try:
        report = seed_defaults(SqlUnitOfWork(db), settings)
        logger.info("Seed completed: %s", report)
        return 0
    except Exception as e:
        db.rollback()
        logger.exception("Seed failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
