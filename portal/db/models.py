"""SQLAlchemy database models."""

import enum
from datetime import date, datetime
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.mysql import CHAR
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys.

    Returns:
        str: UUID as 36-character string.
    """
    return str(uuid4())


class AppRole(str, enum.Enum):
    """Staff role enumeration."""

    ADMIN = "admin"
    SALES = "sales"
    PROJECT_MANAGER = "project_manager"
    STAFF = "staff"
    CLIENT = "client"


class User(Base):
    """Staff user model.

    Attributes:
        id: Primary key UUID.
        email: User email (unique).
        password_hash: bcrypt password hash.
        full_name: User's full name.
        is_active: Whether the user may sign in.
        created_at: Creation timestamp.
        last_login: Last login timestamp.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    last_login: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    roles: Mapped[list["UserRoleAssignment"]] = relationship(
        "UserRoleAssignment", back_populates="user", cascade="all, delete-orphan"
    )


class UserRoleAssignment(Base):
    """Role held by a staff user. A user may hold several roles."""

    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[AppRole] = mapped_column(
        Enum(AppRole, values_callable=lambda x: [e.value for e in x]), nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="roles")


class Client(Base):
    """Customer record. Owned by the staff console; read here for profiles.

    Attributes:
        id: Primary key UUID.
        client_code: Human-facing login identifier (upper-case).
        name: Contact name.
        email: Contact email.
        phone: Contact phone.
        company: Company name.
        is_deleted: Soft-delete flag.
    """

    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    client_code: Mapped[str | None] = mapped_column(String(32), unique=True, nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    credential: Mapped["ClientCredential | None"] = relationship(
        "ClientCredential", back_populates="client", uselist=False
    )
    projects: Mapped[list["Project"]] = relationship("Project", back_populates="client")


class ClientCredential(Base):
    """Client portal login credential, one per client.

    Attributes:
        id: Primary key UUID.
        client_id: Owning client (unique).
        client_code: Copy of the client's login code (unique).
        password_hash: Encoded salted password hash.
        active: Whether the client may log in.
    """

    __tablename__ = "client_auth"

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    client_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("clients.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    client_code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    client: Mapped["Client"] = relationship("Client", back_populates="credential")


class ClientSession(Base):
    """Client portal login session.

    Attributes:
        id: Primary key UUID.
        client_id: Owning client.
        session_token: Random bearer token (unique).
        expires_at: Absolute expiry (naive UTC).
    """

    __tablename__ = "client_sessions"
    __table_args__ = (
        Index("ix_client_sessions_client_id", "client_id"),
        Index("ix_client_sessions_expires_at", "expires_at"),
    )

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    client_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    session_token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


class Service(Base):
    """Service offered to clients (web design, SEO, ...)."""

    __tablename__ = "services"

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class Project(Base):
    """Project delivered for a client.

    Attributes:
        id: Primary key UUID.
        title: Project title.
        status: Free-form status label.
        progress: Completion percentage (0-100).
        client_id: Owning client.
        service_id: Service being delivered.
        is_deleted: Soft-delete flag.
    """

    __tablename__ = "projects"
    __table_args__ = (Index("ix_projects_client_id", "client_id"),)

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(50), default="pending", nullable=False)
    progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    client_id: Mapped[str | None] = mapped_column(
        CHAR(36), ForeignKey("clients.id", ondelete="SET NULL"), nullable=True
    )
    service_id: Mapped[str | None] = mapped_column(
        CHAR(36), ForeignKey("services.id", ondelete="SET NULL"), nullable=True
    )
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    client: Mapped["Client | None"] = relationship("Client", back_populates="projects")
    service: Mapped["Service | None"] = relationship("Service")


class ProjectClientNote(Base):
    """Note left by a client on one of their projects."""

    __tablename__ = "project_client_notes"
    __table_args__ = (Index("ix_project_client_notes_project_id", "project_id"),)

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    project_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    client_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    note_text: Mapped[str] = mapped_column(Text, nullable=False)
    note_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )


class ActivityLog(Base):
    """Audit trail entry for a staff action.

    Attributes:
        id: Primary key UUID.
        action: create, update or delete.
        module: Area of the system the record belongs to.
        record_id: Affected record.
        record_title: Display title of the affected record.
        details: Free-form description.
        performed_by_user_id: Staff user who acted.
        performed_by_name: Staff user's name at the time.
        performed_at: Timestamp.
    """

    __tablename__ = "activity_logs"
    __table_args__ = (Index("ix_activity_logs_module", "module"),)

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    module: Mapped[str] = mapped_column(String(50), nullable=False)
    record_id: Mapped[str | None] = mapped_column(CHAR(36), nullable=True)
    record_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    performed_by_user_id: Mapped[str] = mapped_column(CHAR(36), nullable=False)
    performed_by_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    performed_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
