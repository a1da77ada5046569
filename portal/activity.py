"""Audit trail of staff actions."""

import logging
from typing import Literal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.auth.authorizer import AdminIdentity
from portal.db.models import ActivityLog

logger = logging.getLogger(__name__)

ActionType = Literal["create", "update", "delete"]


def log_activity(
    db: Session,
    identity: AdminIdentity,
    action: ActionType,
    module: str,
    record_id: str | None = None,
    record_title: str | None = None,
    details: str | None = None,
) -> bool:
    """Record a staff action in the activity log.

    A failed write is logged and reported, never raised: the audited
    action has already been committed.

    Args:
        db: Database session.
        identity: Staff member who performed the action.
        action: Kind of change.
        module: Area of the system affected.
        record_id: Affected record ID.
        record_title: Display title of the affected record.
        details: Free-form description.

    Returns:
        bool: True if the entry was written.
    """
    entry = ActivityLog(
        action=action,
        module=module,
        record_id=record_id,
        record_title=record_title,
        details=details,
        performed_by_user_id=identity.user_id,
        performed_by_name=identity.full_name,
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error logging activity {action} on {module}/{record_id}: {e}")
        return False
    return True
