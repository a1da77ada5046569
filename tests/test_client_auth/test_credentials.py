"""Tests for client credential storage."""

import threading
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from portal.client_auth.credentials import CredentialStore, normalize_client_code
from portal.client_auth.hashing import Sha256PasswordHasher
from portal.client_auth.sessions import SessionStore
from portal.db.models import Base, Client, ClientCredential, ClientSession
from portal.exceptions import NotFoundError, ValidationError


@pytest.fixture
def hasher() -> Sha256PasswordHasher:
    return Sha256PasswordHasher()


@pytest.fixture
def store(db: Session, hasher: Sha256PasswordHasher) -> CredentialStore:
    return CredentialStore(db, hasher=hasher)


def _credentials_for(db: Session, client_id: str) -> list[ClientCredential]:
    db.expire_all()
    return db.query(ClientCredential).filter(ClientCredential.client_id == client_id).all()


class TestNormalizeClientCode:
    """Tests for client code normalization."""

    def test_upper_cases_and_strips(self):
        assert normalize_client_code("  c-1 ") == "C-1"


class TestCreateOrReset:
    """Tests for credential creation and password reset."""

    def test_create_returns_code_and_active_credential(
        self, store: CredentialStore, db: Session, test_client_record: Client, hasher
    ):
        """Test first creation inserts an active credential."""
        code = store.create_or_reset(test_client_record.id, "secret1")

        assert code == "C-1"
        rows = _credentials_for(db, test_client_record.id)
        assert len(rows) == 1
        assert rows[0].active is True
        assert rows[0].client_code == "C-1"
        assert hasher.verify("secret1", rows[0].password_hash)

    def test_short_password_rejected(self, store: CredentialStore, test_client_record: Client):
        """Test passwords under six characters are rejected."""
        with pytest.raises(ValidationError):
            store.create_or_reset(test_client_record.id, "12345")

    def test_six_character_password_accepted(
        self, store: CredentialStore, test_client_record: Client
    ):
        """Test the minimum length itself is accepted."""
        assert store.create_or_reset(test_client_record.id, "123456") == "C-1"

    def test_unknown_client(self, store: CredentialStore):
        """Test an unknown client ID raises NotFoundError."""
        with pytest.raises(NotFoundError):
            store.create_or_reset("00000000-0000-0000-0000-000000000000", "secret1")

    def test_deleted_client(self, store: CredentialStore, db: Session, test_client_record: Client):
        """Test a soft-deleted client is treated as unknown."""
        test_client_record.is_deleted = True
        db.commit()

        with pytest.raises(NotFoundError):
            store.create_or_reset(test_client_record.id, "secret1")

    def test_reset_overwrites_password_and_reactivates(
        self, store: CredentialStore, db: Session, test_client_record: Client, hasher
    ):
        """Test a reset replaces the hash and re-enables a disabled login."""
        store.create_or_reset(test_client_record.id, "secret1")
        store.set_active(test_client_record.id, False)

        store.create_or_reset(test_client_record.id, "secret2")

        rows = _credentials_for(db, test_client_record.id)
        assert len(rows) == 1
        assert rows[0].active is True
        assert hasher.verify("secret2", rows[0].password_hash)
        assert not hasher.verify("secret1", rows[0].password_hash)

    def test_concurrent_resets_leave_one_row(self, tmp_path, hasher):
        """Test two threads resetting at once upsert a single row with one winning password."""
        engine = create_engine(
            f"sqlite:///{tmp_path / 'race.db'}",
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        Base.metadata.create_all(bind=engine)
        factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

        with factory() as setup_db:
            record = Client(
                id=str(uuid4()),
                client_code="C-9",
                name="Race Client",
                email="race@example.com",
                phone="+8801800000000",
            )
            setup_db.add(record)
            setup_db.commit()
            client_id = record.id

        passwords = ("password-one", "password-two")
        barrier = threading.Barrier(len(passwords))
        errors = []

        def reset(password: str) -> None:
            with factory() as thread_db:
                barrier.wait()
                try:
                    CredentialStore(thread_db, hasher=hasher).create_or_reset(client_id, password)
                except Exception as e:
                    errors.append(e)

        threads = [threading.Thread(target=reset, args=(p,)) for p in passwords]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        try:
            assert errors == []
            with factory() as check_db:
                rows = (
                    check_db.query(ClientCredential)
                    .filter(ClientCredential.client_id == client_id)
                    .all()
                )
            assert len(rows) == 1
            matches = [p for p in passwords if hasher.verify(p, rows[0].password_hash)]
            assert len(matches) == 1
        finally:
            engine.dispose()

    def test_code_held_by_other_login_rejected(
        self,
        store: CredentialStore,
        db: Session,
        test_client_record: Client,
        other_client_record: Client,
        hasher,
    ):
        """Test a stale login holding the client's code is left untouched."""
        stale_hash = hasher.hash("other-secret")
        db.add(
            ClientCredential(
                client_id=other_client_record.id,
                client_code="C-1",
                password_hash=stale_hash,
                active=False,
            )
        )
        db.commit()

        with pytest.raises(ValidationError):
            store.create_or_reset(test_client_record.id, "secret1")

        assert _credentials_for(db, test_client_record.id) == []
        stale = _credentials_for(db, other_client_record.id)[0]
        assert stale.client_code == "C-1"
        assert stale.password_hash == stale_hash
        assert stale.active is False

    def test_assigned_code_skips_codes_held_by_logins(
        self,
        store: CredentialStore,
        db: Session,
        test_client_record: Client,
        other_client_record: Client,
        hasher,
        monkeypatch,
    ):
        """Test code assignment avoids codes already used by a credential row."""
        db.add(
            ClientCredential(
                client_id=test_client_record.id,
                client_code="CL-ABCDEF",
                password_hash=hasher.hash("secret1"),
            )
        )
        other_client_record.client_code = None
        db.commit()

        candidates = iter(["abcdef", "123456"])
        monkeypatch.setattr(
            "portal.client_auth.credentials.secrets.token_hex", lambda n: next(candidates)
        )

        assert store.create_or_reset(other_client_record.id, "secret2") == "CL-123456"

    def test_unencodable_password_rejected(
        self, store: CredentialStore, test_client_record: Client
    ):
        """Test a password the hasher cannot encode gives a plain validation message."""
        with pytest.raises(ValidationError) as exc_info:
            store.create_or_reset(test_client_record.id, "secret\ud800")

        assert exc_info.value.message == "Password contains invalid characters"
    def test_assigns_code_when_missing(
        self, store: CredentialStore, db: Session, other_client_record: Client
    ):
        """Test a client without a code gets one assigned."""
        other_client_record.client_code = None
        db.commit()

        code = store.create_or_reset(other_client_record.id, "secret1")

        assert code.startswith("CL-")
        assert len(code) == 9
        db.refresh(other_client_record)
        assert other_client_record.client_code == code

    def test_get_by_code_is_case_insensitive(
        self, store: CredentialStore, test_client_record: Client
    ):
        """Test lookups normalize the code."""
        store.create_or_reset(test_client_record.id, "secret1")

        credential = store.get_by_code(" c-1")
        assert credential is not None
        assert credential.client_id == test_client_record.id


class TestSetActive:
    """Tests for enabling and disabling credentials."""

    def test_disable_revokes_every_session(
        self, store: CredentialStore, db: Session, test_client_record: Client
    ):
        """Test disabling deletes all sessions of the client."""
        store.create_or_reset(test_client_record.id, "secret1")
        sessions = SessionStore(db)
        first = sessions.issue(test_client_record.id).session_token
        second = sessions.issue(test_client_record.id).session_token

        revoked = store.set_active(test_client_record.id, False)

        assert revoked == 2
        assert sessions.resolve(first) is None
        assert sessions.resolve(second) is None
        assert store.get_by_client(test_client_record.id).active is False

    def test_disable_leaves_other_clients_sessions(
        self,
        store: CredentialStore,
        db: Session,
        test_client_record: Client,
        other_client_record: Client,
    ):
        """Test the cascade is scoped to the disabled client."""
        store.create_or_reset(test_client_record.id, "secret1")
        store.create_or_reset(other_client_record.id, "secret2")
        sessions = SessionStore(db)
        other = sessions.issue(other_client_record.id).session_token

        store.set_active(test_client_record.id, False)

        assert sessions.resolve(other) is not None

    def test_enable_does_not_restore_sessions(
        self, store: CredentialStore, db: Session, test_client_record: Client
    ):
        """Test re-enabling creates no sessions."""
        store.create_or_reset(test_client_record.id, "secret1")
        SessionStore(db).issue(test_client_record.id)
        store.set_active(test_client_record.id, False)

        revoked = store.set_active(test_client_record.id, True)

        assert revoked == 0
        assert store.get_by_client(test_client_record.id).active is True
        assert db.query(ClientSession).count() == 0

    def test_failed_cascade_rolls_back_flag(
        self, store: CredentialStore, db: Session, test_client_record: Client, monkeypatch
    ):
        """Test the flag flip and the revocation commit together or not at all."""
        store.create_or_reset(test_client_record.id, "secret1")
        token = SessionStore(db).issue(test_client_record.id).session_token

        def broken_revoke_all(client_id):
            raise RuntimeError("boom")

        monkeypatch.setattr(store.sessions, "revoke_all", broken_revoke_all)
        with pytest.raises(RuntimeError):
            store.set_active(test_client_record.id, False)

        db.expire_all()
        assert store.get_by_client(test_client_record.id).active is True
        assert SessionStore(db).resolve(token) is not None

    def test_unknown_client(self, store: CredentialStore):
        with pytest.raises(NotFoundError):
            store.set_active("00000000-0000-0000-0000-000000000000", False)

    def test_client_without_login(self, store: CredentialStore, test_client_record: Client):
        """Test toggling a client that never had credentials raises NotFoundError."""
        with pytest.raises(NotFoundError):
            store.set_active(test_client_record.id, True)

