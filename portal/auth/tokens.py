"""Staff bearer tokens.

Staff tokens are HS256 JWTs issued by ``/api/auth/login``. They are only
ever accepted on staff and admin paths; client portal sessions use opaque
database tokens instead.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from pydantic import BaseModel

from portal.config import get_settings

settings = get_settings()

STAFF_TOKEN_TYPE = "staff_access"


class StaffClaims(BaseModel):
    """Claims carried by a valid staff token."""

    user_id: str
    email: str | None = None
    issued_at: datetime | None = None


def create_access_token(
    user_id: str,
    email: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Issue a staff bearer token.

    Args:
        user_id: Staff user's UUID.
        email: Staff user's email.
        expires_delta: Lifetime, defaults to the configured access token lifetime.

    Returns:
        str: Encoded JWT.
    """
    now = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": user_id,
        "email": email,
        "iss": settings.app_name,
        "iat": now,
        "exp": now + lifetime,
        "type": STAFF_TOKEN_TYPE,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> StaffClaims | None:
    """Validate a staff bearer token.

    Args:
        token: Encoded JWT.

    Returns:
        StaffClaims | None: Claims if the signature, issuer, expiry and
        token type all check out, None otherwise.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            issuer=settings.app_name,
        )
    except JWTError:
        return None

    if payload.get("type") != STAFF_TOKEN_TYPE or not payload.get("sub"):
        return None

    issued_at = payload.get("iat")
    return StaffClaims(
        user_id=payload["sub"],
        email=payload.get("email"),
        issued_at=datetime.fromtimestamp(issued_at, UTC) if issued_at else None,
    )
