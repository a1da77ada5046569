"""Pydantic schemas for client portal authentication actions."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class EmptyPayload(BaseModel):
    """Payload for actions that take no body fields."""


class LoginPayload(BaseModel):
    """Client login request.

    Attributes:
        client_code: Login code, case-insensitive.
        password: Plain text password.
    """

    client_code: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)


class CreateCredentialsPayload(BaseModel):
    """Admin request to create or reset a client's login.

    Attributes:
        client_id: Client UUID.
        password: New password; length policy is enforced by the store.
    """

    client_id: str = Field(..., min_length=1, max_length=36)
    password: str


class ToggleActivePayload(BaseModel):
    """Admin request to enable or disable a client's login."""

    client_id: str = Field(..., min_length=1, max_length=36)
    active: bool


class ClientProfile(BaseModel):
    """Read-only client projection returned to the portal."""

    id: str
    client_code: str | None = None
    name: str
    email: str | None = None
    phone: str | None = None
    company: str | None = None

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    """Successful login."""

    success: bool = True
    session_token: str
    expires_at: datetime
    client: ClientProfile

    @field_serializer("expires_at")
    def serialize_expires_at(self, value: datetime) -> str:
        # Stored naive in UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.isoformat()


class VerifyResponse(BaseModel):
    """Valid session."""

    valid: bool = True
    client: ClientProfile


class ClientWithLogin(ClientProfile):
    """Client row for the admin access screen.

    Attributes:
        has_login: Whether portal credentials exist.
        login_active: Whether those credentials are enabled.
    """

    has_login: bool = False
    login_active: bool = False
