"""Expired client session cleanup."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from portal.client_auth.sessions import SessionStore
from portal.db.database import SessionLocal

logger = logging.getLogger(__name__)


def purge_expired_sessions(db: Session | None = None) -> dict[str, Any]:
    """Delete client sessions whose expiry has passed.

    Called by the cron endpoint and the CLI. Opens its own database
    session when none is given.

    Args:
        db: Optional database session.

    Returns:
        dict: Number of sessions purged.
    """
    own_session = db is None
    db = db or SessionLocal()
    try:
        purged = SessionStore(db).purge_expired()
    finally:
        if own_session:
            db.close()

    logger.info(f"Session cleanup finished, {purged} sessions purged")
    return {"sessions_purged": purged}
