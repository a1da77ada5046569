"""Client portal authentication service layer."""

import logging

from sqlalchemy.orm import Session

from portal.client_auth.credentials import CredentialStore, normalize_client_code
from portal.client_auth.hashing import PasswordHasher, get_password_hasher
from portal.client_auth.schemas import ClientWithLogin
from portal.client_auth.sessions import SessionStore
from portal.db.models import Client, ClientCredential, ClientSession
from portal.exceptions import AuthenticationError, InvalidSessionError

logger = logging.getLogger(__name__)


class ClientAuthService:
    """Login, session verification and logout for portal clients.

    Attributes:
        db: Database session.
        hasher: Password hasher used to check passwords.
        sessions: Session store.
        credentials: Credential store.
    """

    def __init__(
        self,
        db: Session,
        hasher: PasswordHasher | None = None,
        sessions: SessionStore | None = None,
        credentials: CredentialStore | None = None,
    ):
        """Initialize the service.

        Args:
            db: Database session.
            hasher: Password hasher, defaults to the configured scheme.
            sessions: Session store, defaults to one on ``db``.
            credentials: Credential store, defaults to one on ``db``.
        """
        self.db = db
        self.hasher = hasher or get_password_hasher()
        self.sessions = sessions or SessionStore(db)
        self.credentials = credentials or CredentialStore(
            db, hasher=self.hasher, sessions=self.sessions
        )

    def _get_client(self, client_id: str) -> Client | None:
        return (
            self.db.query(Client)
            .filter(Client.id == client_id, Client.is_deleted.is_(False))
            .first()
        )

    def login(self, client_code: str, password: str) -> tuple[ClientSession, Client]:
        """Check a client's code and password and open a session.

        All rejections are ``AuthenticationError`` (401) with distinct
        messages.

        Args:
            client_code: Login code, any case.
            password: Plain text password.

        Returns:
            tuple: (new session, client record).

        Raises:
            AuthenticationError: If the code is unknown, the account is
                disabled or the password is wrong.
        """
        code = normalize_client_code(client_code)
        credential = self.credentials.get_by_code(code)
        client = self._get_client(credential.client_id) if credential else None

        if credential is None or client is None:
            logger.info(f"Client login rejected for {code}: unknown code")
            raise AuthenticationError("Invalid client code")

        if not credential.active:
            logger.info(f"Client login rejected for {code}: account disabled")
            raise AuthenticationError("This account has been disabled")

        if not self.hasher.verify(password, credential.password_hash):
            logger.info(f"Client login rejected for {code}: wrong password")
            raise AuthenticationError("Incorrect password")

        session = self.sessions.issue(client.id)
        logger.info(f"Client {code} logged in")
        return session, client

    def authenticate(self, session_token: str | None) -> Client:
        """Resolve a session token to its client.

        The session must be unexpired and its credential still active.

        Args:
            session_token: Client session token.

        Returns:
            Client: The session owner.

        Raises:
            InvalidSessionError: If the session is not valid.
        """
        session = self.sessions.resolve(session_token)
        if session is None:
            raise InvalidSessionError()

        credential = self.credentials.get_by_client(session.client_id)
        if credential is None or not credential.active:
            raise InvalidSessionError()

        client = self._get_client(session.client_id)
        if client is None:
            raise InvalidSessionError()
        return client

    def logout(self, session_token: str | None) -> None:
        """End a session. Unknown or missing tokens are ignored.

        Args:
            session_token: Client session token.
        """
        if self.sessions.revoke(session_token):
            logger.info("Client session revoked on logout")

    def list_clients(self) -> list[ClientWithLogin]:
        """List clients with their portal login status, newest first.

        Returns:
            list[ClientWithLogin]: One entry per non-deleted client.
        """
        rows = (
            self.db.query(Client, ClientCredential.active)
            .outerjoin(ClientCredential, ClientCredential.client_id == Client.id)
            .filter(Client.is_deleted.is_(False))
            .order_by(Client.created_at.desc(), Client.name)
            .all()
        )
        return [
            ClientWithLogin(
                id=client.id,
                client_code=client.client_code,
                name=client.name,
                email=client.email,
                phone=client.phone,
                company=client.company,
                has_login=active is not None,
                login_active=bool(active),
            )
            for client, active in rows
        ]


def get_client_auth_service(db: Session) -> ClientAuthService:
    """Factory function for ClientAuthService.

    Args:
        db: Database session.

    Returns:
        ClientAuthService: Service instance.
    """
    return ClientAuthService(db)
