"""Client portal credential storage."""

import logging
import secrets

from sqlalchemy import func, update
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.orm import Session

from portal.client_auth.hashing import PasswordHasher, get_password_hasher
from portal.client_auth.sessions import SessionStore
from portal.db.database import transaction
from portal.db.models import Client, ClientCredential, generate_uuid
from portal.exceptions import NotFoundError, StoreError, ValidationError

logger = logging.getLogger(__name__)

CLIENT_CODE_PREFIX = "CL-"


def normalize_client_code(code: str) -> str:
    """Normalize a client code for storage and comparison."""
    return code.strip().upper()


def _insert_for(db: Session):
    """Return the dialect-specific ``insert`` supporting upserts."""
    dialect = db.get_bind().dialect.name
    if dialect == "mysql":
        return mysql.insert
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise StoreError(f"Credential upsert is not supported on {dialect}")


class CredentialStore:
    """Creates, resets and toggles client portal credentials.

    Attributes:
        db: Database session.
        hasher: Password hasher for new credentials.
        sessions: Session store used for the deactivation cascade.
        min_password_length: Minimum accepted password length.
    """

    def __init__(
        self,
        db: Session,
        hasher: PasswordHasher | None = None,
        sessions: SessionStore | None = None,
        min_password_length: int | None = None,
    ):
        if min_password_length is None:
            from portal.config import get_settings

            min_password_length = get_settings().client_password_min_length
        self.db = db
        self.hasher = hasher or get_password_hasher()
        self.sessions = sessions or SessionStore(db)
        self.min_password_length = min_password_length

    def _get_client(self, client_id: str) -> Client:
        client = (
            self.db.query(Client)
            .filter(Client.id == client_id, Client.is_deleted.is_(False))
            .first()
        )
        if not client:
            raise NotFoundError("Client not found")
        return client

    def _code_taken(self, code: str) -> bool:
        client = self.db.query(Client.id).filter(Client.client_code == code).first()
        credential = (
            self.db.query(ClientCredential.id).filter(ClientCredential.client_code == code).first()
        )
        return client is not None or credential is not None

    def _assign_client_code(self, client: Client) -> str:
        """Give a client a unique login code if it has none yet."""
        while True:
            code = f"{CLIENT_CODE_PREFIX}{secrets.token_hex(3).upper()}"
            if not self._code_taken(code):
                break
        client.client_code = code
        return code

    def get_by_code(self, client_code: str) -> ClientCredential | None:
        """Find a credential by login code (case-insensitive).

        Args:
            client_code: Login code as typed by the client.

        Returns:
            ClientCredential | None: Matching credential.
        """
        return (
            self.db.query(ClientCredential)
            .filter(ClientCredential.client_code == normalize_client_code(client_code))
            .first()
        )

    def get_by_client(self, client_id: str) -> ClientCredential | None:
        """Find the credential belonging to a client."""
        return (
            self.db.query(ClientCredential).filter(ClientCredential.client_id == client_id).first()
        )

    def create_or_reset(self, client_id: str, password: str) -> str:
        """Create a client's credential or reset its password.

        A single upsert keyed on ``client_id``: inserts an active
        credential, or overwrites the hash and re-enables login. Racing
        calls leave exactly one row and the last writer's password.

        Args:
            client_id: Client ID.
            password: New plain text password.

        Returns:
            str: The client's login code.

        Raises:
            ValidationError: If the password is too short or invalid, or the
                client code belongs to another login.
            NotFoundError: If the client does not exist.
            StoreError: If the database write fails.
        """
        if not isinstance(password, str) or len(password) < self.min_password_length:
            raise ValidationError(
                f"Password must be at least {self.min_password_length} characters"
            )

        try:
            password_hash = self.hasher.hash(password)
        except ValueError as e:
            raise ValidationError("Password contains invalid characters") from e

        with transaction(self.db):
            client = self._get_client(client_id)
            client_code = client.client_code or self._assign_client_code(client)
            client_code = normalize_client_code(client_code)

            # MySQL upserts on any unique key, so a code held by another
            # client's login would overwrite that login
            holder = (
                self.db.query(ClientCredential.client_id)
                .filter(
                    ClientCredential.client_code == client_code,
                    ClientCredential.client_id != client.id,
                )
                .first()
            )
            if holder:
                raise ValidationError(
                    f"Client code {client_code} is already used by another login"
                )

            insert = _insert_for(self.db)
            stmt = insert(ClientCredential.__table__).values(
                id=generate_uuid(),
                client_id=client.id,
                client_code=client_code,
                password_hash=password_hash,
                active=True,
            )
            new_values = {
                "client_code": client_code,
                "password_hash": password_hash,
                "active": True,
                "updated_at": func.now(),
            }
            if insert is mysql.insert:
                stmt = stmt.on_duplicate_key_update(**new_values)
            else:
                stmt = stmt.on_conflict_do_update(index_elements=["client_id"], set_=new_values)
            self.db.execute(stmt)

        # The upsert bypasses the identity map
        self.db.expire_all()
        logger.info(f"Client portal credentials saved for client {client_code}")
        return client_code

    def set_active(self, client_id: str, active: bool) -> int:
        """Enable or disable a client's portal login.

        Disabling deletes every session of the client in the same
        transaction. Enabling never restores old sessions.

        Args:
            client_id: Client ID.
            active: New active flag.

        Returns:
            int: Number of sessions revoked.

        Raises:
            NotFoundError: If the client or its credential does not exist.
            StoreError: If the database write fails.
        """
        revoked = 0
        with transaction(self.db):
            self._get_client(client_id)
            result = self.db.execute(
                update(ClientCredential)
                .where(ClientCredential.client_id == client_id)
                .values(active=active, updated_at=func.now())
            )
            if result.rowcount == 0:
                raise NotFoundError("Client has no portal login")
            if not active:
                revoked = self.sessions.revoke_all(client_id)

        self.db.expire_all()
        logger.info(
            f"Client portal login {'enabled' if active else 'disabled'} for client {client_id}; "
            f"revoked {revoked} sessions"
        )
        return revoked
