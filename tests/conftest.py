"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from uuid import uuid4

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["DEBUG"] = "false"
os.environ["CRON_SECRET_KEY"] = "test-cron-secret"
os.environ["CLIENT_PASSWORD_SCHEME"] = "sha256"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from portal.auth.tokens import create_access_token
from portal.client_auth.hashing import BcryptPasswordHasher
from portal.db.models import (
    AppRole,
    Base,
    Client,
    Project,
    Service,
    User,
    UserRoleAssignment,
)

# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    # Import here to ensure env vars are set
    from portal.dependencies import get_db
    from portal.main import app

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create_staff(db: Session, email: str, full_name: str, roles: list[AppRole]) -> User:
    user = User(
        id=str(uuid4()),
        email=email,
        password_hash=BcryptPasswordHasher(rounds=4).hash("staffpassword123"),
        full_name=full_name,
        is_active=True,
    )
    for role in roles:
        user.roles.append(UserRoleAssignment(role=role))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_admin(db: Session) -> User:
    """Create a staff user with the admin role."""
    return _create_staff(db, "admin@example.com", "Admin User", [AppRole.ADMIN])


@pytest.fixture
def test_staff(db: Session) -> User:
    """Create a staff user without the admin role."""
    return _create_staff(
        db, "sales@example.com", "Sales User", [AppRole.SALES, AppRole.PROJECT_MANAGER]
    )


@pytest.fixture
def admin_headers(test_admin: User) -> dict[str, str]:
    """Authorization headers for the admin user."""
    token = create_access_token(test_admin.id, test_admin.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def staff_headers(test_staff: User) -> dict[str, str]:
    """Authorization headers for the non-admin staff user."""
    token = create_access_token(test_staff.id, test_staff.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_client_record(db: Session) -> Client:
    """Create a client with a login code."""
    record = Client(
        id=str(uuid4()),
        client_code="C-1",
        name="Rahim Uddin",
        email="rahim@example.com",
        phone="+8801700000000",
        company="Uddin Traders",
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def other_client_record(db: Session) -> Client:
    """Create a second client."""
    record = Client(
        id=str(uuid4()),
        client_code="C-2",
        name="Karim Ahmed",
        email="karim@example.com",
        phone="+8801800000000",
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def test_service(db: Session) -> Service:
    """Create a service."""
    service = Service(
        id=str(uuid4()),
        name="Website Design",
        category="web",
        description="Responsive business website",
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@pytest.fixture
def test_project(db: Session, test_client_record: Client, test_service: Service) -> Project:
    """Create a project for the test client."""
    project = Project(
        id=str(uuid4()),
        title="Company Website",
        status="in_progress",
        progress=40,
        client_id=test_client_record.id,
        service_id=test_service.id,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return project
