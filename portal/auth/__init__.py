"""Staff authentication module."""

from portal.auth.authorizer import AdminAuthorizer, AdminIdentity
from portal.auth.tokens import StaffClaims, create_access_token, decode_access_token

__all__ = [
    "AdminAuthorizer",
    "AdminIdentity",
    "StaffClaims",
    "create_access_token",
    "decode_access_token",
]
