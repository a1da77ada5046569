"""Cron-triggered housekeeping routes."""

from typing import Annotated

from fastapi import APIRouter, Header, HTTPException, status

from portal.config import get_settings
from portal.dependencies import DbSession
from portal.scheduler.session_cleanup import purge_expired_sessions

router = APIRouter()


@router.post("/purge-sessions")
async def purge_sessions(
    db: DbSession,
    x_cron_secret: Annotated[str | None, Header()] = None,
):
    """Delete expired client sessions (for cron jobs).

    Args:
        db: Database session.
        x_cron_secret: Secret key for authentication.

    Returns:
        dict: Number of sessions purged.

    Raises:
        HTTPException: If secret key is invalid.
    """
    settings = get_settings()

    # Check for cron secret if configured
    expected_secret = settings.cron_secret_key
    if expected_secret and x_cron_secret != expected_secret:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid cron secret",
        )

    return purge_expired_sessions(db)
