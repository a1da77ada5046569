"""Error hierarchy shared by the portal services.

Every error carries the HTTP status it maps to, so routers and the
application-level exception handler never need to inspect the type.
"""

from typing import Any


class PortalError(Exception):
    """Base error with a human-readable message and an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> dict[str, Any]:
        """Render the error as a response body."""
        return {"error": self.message}


class ValidationError(PortalError):
    """Malformed or missing input."""

    status_code = 400


class AuthenticationError(PortalError):
    """Unknown client code, wrong password, disabled account or bad token."""

    status_code = 401


class InvalidSessionError(AuthenticationError):
    """Client session token is absent, expired, revoked or disabled."""

    def __init__(self, message: str = "Invalid or expired session"):
        super().__init__(message)

    def to_body(self) -> dict[str, Any]:
        return {"valid": False, "error": self.message}


class AuthorizationError(PortalError):
    """Authenticated staff member lacks the required role."""

    status_code = 403


class NotFoundError(PortalError):
    """Referenced record does not exist."""

    status_code = 404


class StoreError(PortalError):
    """Underlying persistence failure."""

    status_code = 500
