"""Client portal session storage."""

import logging
import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from sqlalchemy import delete
from sqlalchemy.orm import Session

from portal.db.database import transaction
from portal.db.models import ClientSession

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Current wall-clock time as naive UTC, matching stored timestamps."""
    return datetime.now(UTC).replace(tzinfo=None)


def generate_session_token() -> str:
    """Generate an unguessable session token.

    Returns:
        str: 64-character hex token (256 bits of randomness).
    """
    return secrets.token_hex(32)


class SessionStore:
    """Issues, resolves and revokes client sessions.

    Attributes:
        db: Database session.
        ttl: Lifetime of a newly issued session.
        clock: Callable returning the current naive UTC time.
    """

    def __init__(
        self,
        db: Session,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        if ttl is None:
            from portal.config import get_settings

            ttl = timedelta(days=get_settings().client_session_ttl_days)
        self.db = db
        self.ttl = ttl
        self.clock = clock

    def issue(self, client_id: str) -> ClientSession:
        """Create a new session for a client.

        Other sessions of the same client stay valid.

        Args:
            client_id: Owning client ID.

        Returns:
            ClientSession: The persisted session.
        """
        session = ClientSession(
            client_id=client_id,
            session_token=generate_session_token(),
            expires_at=self.clock() + self.ttl,
        )
        with transaction(self.db):
            self.db.add(session)
        return session

    def resolve(self, token: str | None) -> ClientSession | None:
        """Look up an unexpired session by token.

        Expired rows are filtered out by the query, not deleted.

        Args:
            token: Session token.

        Returns:
            ClientSession | None: The session if present and unexpired.
        """
        if not token:
            return None
        return (
            self.db.query(ClientSession)
            .filter(
                ClientSession.session_token == token,
                ClientSession.expires_at > self.clock(),
            )
            .first()
        )

    def revoke(self, token: str | None) -> bool:
        """Delete a session. Revoking an unknown token is not an error.

        Args:
            token: Session token.

        Returns:
            bool: True if a row was deleted.
        """
        if not token:
            return False
        with transaction(self.db):
            result = self.db.execute(
                delete(ClientSession).where(ClientSession.session_token == token)
            )
        return result.rowcount > 0

    def revoke_all(self, client_id: str) -> int:
        """Delete every session of a client.

        Joins an enclosing ``transaction`` when called inside one.

        Args:
            client_id: Owning client ID.

        Returns:
            int: Number of sessions deleted.
        """
        with transaction(self.db):
            result = self.db.execute(
                delete(ClientSession).where(ClientSession.client_id == client_id)
            )
        return result.rowcount

    def purge_expired(self) -> int:
        """Delete sessions whose expiry has passed.

        Returns:
            int: Number of sessions deleted.
        """
        with transaction(self.db):
            result = self.db.execute(
                delete(ClientSession).where(ClientSession.expires_at <= self.clock())
            )
        count = result.rowcount
        if count:
            logger.info(f"Purged {count} expired client sessions")
        return count
