"""Dependency injection for FastAPI."""

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from portal.auth.authorizer import AdminAuthorizer
from portal.config import get_settings
from portal.db.database import SessionLocal
from portal.db.models import User
from portal.exceptions import AuthenticationError

security = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """Get database session.

    Yields:
        Session: SQLAlchemy session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    """Extract the staff bearer token, if any.

    Args:
        credentials: HTTP Bearer token credentials.

    Returns:
        str | None: Raw token.
    """
    if credentials is None:
        return None
    return credentials.credentials


def get_client_session_token(request: Request) -> str | None:
    """Extract the client session token from the configured header.

    Args:
        request: FastAPI request object.

    Returns:
        str | None: Raw session token.
    """
    token = request.headers.get(get_settings().client_session_header)
    return token.strip() if token else None


async def get_current_staff(
    token: Annotated[str | None, Depends(get_bearer_token)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current staff user from the bearer token.

    Args:
        token: Raw bearer token.
        db: Database session.

    Returns:
        User: The authenticated staff user.

    Raises:
        HTTPException: If authentication fails.
    """
    try:
        return AdminAuthorizer(db).resolve_user(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


# Type aliases for cleaner dependency injection
DbSession = Annotated[Session, Depends(get_db)]
BearerToken = Annotated[str | None, Depends(get_bearer_token)]
ClientSessionToken = Annotated[str | None, Depends(get_client_session_token)]
CurrentStaff = Annotated[User, Depends(get_current_staff)]
