"""Pydantic schemas for staff authentication."""

from pydantic import BaseModel, ConfigDict, EmailStr


class StaffLogin(BaseModel):
    """Schema for staff login.

    Attributes:
        email: User's email address.
        password: User's password.
    """

    email: EmailStr
    password: str


class Token(BaseModel):
    """Schema for JWT token response.

    Attributes:
        access_token: JWT access token.
        token_type: Token type (always "bearer").
    """

    access_token: str
    token_type: str = "bearer"


class StaffResponse(BaseModel):
    """Schema for staff user response.

    Attributes:
        id: User's UUID.
        email: User's email.
        full_name: User's full name.
        roles: Roles held by the user.
    """

    id: str
    email: str
    full_name: str
    roles: list[str] = []

    model_config = ConfigDict(from_attributes=True)
