"""Client portal credential and session authentication."""

from portal.client_auth.credentials import CredentialStore, normalize_client_code
from portal.client_auth.hashing import (
    BcryptPasswordHasher,
    PasswordHasher,
    Sha256PasswordHasher,
    get_password_hasher,
)
from portal.client_auth.service import ClientAuthService
from portal.client_auth.sessions import SessionStore

__all__ = [
    "PasswordHasher",
    "Sha256PasswordHasher",
    "BcryptPasswordHasher",
    "get_password_hasher",
    "CredentialStore",
    "SessionStore",
    "ClientAuthService",
    "normalize_client_code",
]
