"""Password hashing for client portal credentials.

Stored records are opaque strings. The default ``sha256`` scheme encodes
``<salt hex>:<digest hex>`` where digest = SHA-256(salt bytes + UTF-8
password). The ``bcrypt`` scheme stores a standard bcrypt hash and adds
a tunable work factor.
"""

import hashlib
import hmac
import secrets
from abc import ABC, abstractmethod

import bcrypt

SALT_DELIMITER = ":"


class PasswordHasher(ABC):
    """Salts, hashes and verifies client passwords."""

    @abstractmethod
    def hash(self, password: str) -> str:
        """Hash a password with a fresh random salt.

        Args:
            password: Plain text password.

        Returns:
            str: Encoded hash record.
        """

    @abstractmethod
    def verify(self, password: str, record: str) -> bool:
        """Check a password against a stored record.

        Malformed records never raise; they simply do not match.

        Args:
            password: Plain text password.
            record: Stored hash record.

        Returns:
            bool: True if the password matches.
        """


class Sha256PasswordHasher(PasswordHasher):
    """Single-pass salted SHA-256, encoded as ``salt:digest`` in hex."""

    def __init__(self, salt_bytes: int = 16):
        if salt_bytes < 16:
            raise ValueError("salt_bytes must be at least 16")
        self.salt_bytes = salt_bytes

    @staticmethod
    def _digest(salt: bytes, password: str) -> str:
        return hashlib.sha256(salt + password.encode("utf-8")).hexdigest()

    def hash(self, password: str) -> str:
        salt = secrets.token_bytes(self.salt_bytes)
        return f"{salt.hex()}{SALT_DELIMITER}{self._digest(salt, password)}"

    def verify(self, password: str, record: str) -> bool:
        if not isinstance(record, str) or not isinstance(password, str):
            return False

        salt_hex, sep, digest_hex = record.partition(SALT_DELIMITER)
        if not sep or not salt_hex or not digest_hex:
            return False

        try:
            salt = bytes.fromhex(salt_hex)
            bytes.fromhex(digest_hex)
            expected = self._digest(salt, password)
        except ValueError:
            # Bad hex, or a password that cannot be encoded
            return False

        return hmac.compare_digest(expected, digest_hex.lower())


class BcryptPasswordHasher(PasswordHasher):
    """bcrypt with a configurable cost factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        password_bytes = password.encode("utf-8")
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify(self, password: str, record: str) -> bool:
        if not isinstance(record, str) or not isinstance(password, str):
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), record.encode("utf-8"))
        except ValueError:
            # Not a bcrypt hash, or unencodable input
            return False


def get_password_hasher(scheme: str | None = None) -> PasswordHasher:
    """Build the password hasher for a scheme.

    Args:
        scheme: ``sha256`` or ``bcrypt``. Defaults to the configured scheme.

    Returns:
        PasswordHasher: Hasher instance.

    Raises:
        ValueError: If the scheme is unknown.
    """
    from portal.config import get_settings

    settings = get_settings()
    scheme = scheme or settings.client_password_scheme

    if scheme == "sha256":
        return Sha256PasswordHasher(salt_bytes=settings.client_password_salt_bytes)
    if scheme == "bcrypt":
        return BcryptPasswordHasher()
    raise ValueError(f"Unknown password scheme: {scheme}")
