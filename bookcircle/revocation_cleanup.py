"""
CLI entrypoint for purging expired revocation entries. Run from cron, e.g.:

  python -m bookcircle.revocation_cleanup

Or hourly: 0 * * * * cd /path/to/bookcircle && .venv/bin/python -m bookcircle.revocation_cleanup
"""

import logging
import sys

from bookcircle.core.config import get_settings
from bookcircle.core.database import SessionLocal
from bookcircle.repositories import SqlRevocationStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Delete revoked-token rows whose tokens have expired on their own."""
    settings = get_settings()
    if not settings.TOKEN_REVOCATION_ENABLED:
        logger.info("Token revocation is disabled (TOKEN_REVOCATION_ENABLED=false); skipping.")
        return 0
    db = SessionLocal()
    try:
        deleted = SqlRevocationStore(db).purge_expired()
        logger.info("Revocation cleanup completed: entries_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Revocation cleanup failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
