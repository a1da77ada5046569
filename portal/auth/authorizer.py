"""Resolution of staff bearer tokens to admin identities."""

import logging

from pydantic import BaseModel
from sqlalchemy.orm import Session

from portal.auth.tokens import decode_access_token
from portal.db.models import AppRole, User, UserRoleAssignment
from portal.exceptions import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)


class AdminIdentity(BaseModel):
    """Staff member allowed to manage client credentials."""

    user_id: str
    email: str
    full_name: str

class AdminAuthorizer:
    """Confirms that a staff bearer token belongs to an administrator."""

    def __init__(self, db: Session):
        self.db = db

    def resolve_user(self, bearer_token: str | None) -> User:
        """Resolve a bearer token to an active staff user.

        Args:
            bearer_token: Raw JWT, without the ``Bearer`` prefix.

        Returns:
            User: The staff user.

        Raises:
            AuthenticationError: If the token is missing, invalid or expired,
                or the user is unknown or disabled.
        """
        if not bearer_token:
            raise AuthenticationError("Not authenticated")

        token_data = decode_access_token(bearer_token)
        if token_data is None:
            raise AuthenticationError("Invalid or expired token")

        user = self.db.query(User).filter(User.id == token_data.user_id).first()
        if user is None or not user.is_active:
            raise AuthenticationError("Invalid or expired token")
        return user

    def has_role(self, user_id: str, role: AppRole) -> bool:
        """Check whether a staff user holds a role."""
        return (
            self.db.query(UserRoleAssignment.id)
            .filter(UserRoleAssignment.user_id == user_id, UserRoleAssignment.role == role)
            .first()
            is not None
        )

    def authorize_admin(self, bearer_token: str | None) -> AdminIdentity:
        """Require an administrator behind the bearer token.

        Args:
            bearer_token: Raw JWT, without the ``Bearer`` prefix.

        Returns:
            AdminIdentity: Identity to attribute the action to.

        Raises:
            AuthenticationError: If the token does not resolve to a user.
            AuthorizationError: If the user is not an administrator.
        """
        user = self.resolve_user(bearer_token)
        if not self.has_role(user.id, AppRole.ADMIN):
            logger.warning(f"Non-admin user {user.email} attempted a credential action")
            raise AuthorizationError("Admin access required")
        return AdminIdentity(user_id=user.id, email=user.email, full_name=user.full_name)
