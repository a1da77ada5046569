"""Staff authentication service layer."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from portal.auth.schemas import StaffLogin, StaffResponse, Token
from portal.auth.tokens import create_access_token
from portal.client_auth.hashing import BcryptPasswordHasher, PasswordHasher
from portal.db.database import transaction
from portal.db.models import AppRole, User, UserRoleAssignment

logger = logging.getLogger(__name__)


class AuthService:
    """Service class for staff authentication operations."""

    def __init__(self, db: Session, hasher: PasswordHasher | None = None):
        """Initialize auth service.

        Args:
            db: Database session.
            hasher: Staff password hasher, bcrypt by default.
        """
        self.db = db
        self.hasher = hasher or BcryptPasswordHasher()

    def login(self, data: StaffLogin) -> tuple[User | None, Token | None, str]:
        """Authenticate a staff user and return a bearer token.

        Args:
            data: Login credentials.

        Returns:
            tuple: (User or None, Token or None, status message).
        """
        user = self.db.query(User).filter(User.email == data.email.lower()).first()

        if not user or not self.hasher.verify(data.password, user.password_hash):
            return None, None, "Invalid email or password."

        if not user.is_active:
            return None, None, "Your account has been deactivated. Contact your administrator."

        with transaction(self.db):
            user.last_login = datetime.now(UTC).replace(tzinfo=None)

        token = Token(access_token=create_access_token(user.id, user.email))
        logger.info(f"Staff user {user.email} logged in")
        return user, token, "Login successful."

    def create_admin(self, email: str, full_name: str, password: str) -> User:
        """Create a staff user holding the admin role.

        Args:
            email: Login email.
            full_name: Display name.
            password: Plain text password.

        Returns:
            User: The new user.

        Raises:
            ValueError: If the email is already registered.
        """
        email = email.lower()
        if self.db.query(User).filter(User.email == email).first():
            raise ValueError(f"User {email} already exists")

        user = User(email=email, full_name=full_name, password_hash=self.hasher.hash(password))
        user.roles.append(UserRoleAssignment(role=AppRole.ADMIN))
        with transaction(self.db):
            self.db.add(user)
        self.db.refresh(user)
        return user

    def get_user_response(self, user: User) -> StaffResponse:
        """Build the API projection of a staff user."""
        return StaffResponse(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            roles=sorted(assignment.role.value for assignment in user.roles),
        )


def get_auth_service(db: Session) -> AuthService:
    """Factory function for AuthService.

    Args:
        db: Database session.

    Returns:
        AuthService: Auth service instance.
    """
    return AuthService(db)
