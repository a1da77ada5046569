"""Initial database schema.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Schema for the client portal service including:
- Staff users and their roles
- Clients, services and projects
- Client portal credentials and sessions
- Client project notes
- Activity logs
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

APP_ROLES = ("admin", "sales", "project_manager", "staff", "client")


def upgrade() -> None:
    """Create all tables."""

    # Staff users
    op.create_table(
        "users",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=True, default=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "user_roles",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("user_id", mysql.CHAR(36), nullable=False),
        sa.Column("role", sa.Enum(*APP_ROLES, name="approle"), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )

    # Clients
    op.create_table(
        "clients",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("client_code", sa.String(32), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=True, default=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("client_code"),
    )

    # Client portal credentials (one per client)
    op.create_table(
        "client_auth",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("client_id", mysql.CHAR(36), nullable=False),
        sa.Column("client_code", sa.String(32), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("client_id"),
        sa.UniqueConstraint("client_code"),
    )

    # Client portal sessions
    op.create_table(
        "client_sessions",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("client_id", mysql.CHAR(36), nullable=False),
        sa.Column("session_token", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("session_token"),
    )
    op.create_index("ix_client_sessions_client_id", "client_sessions", ["client_id"])
    op.create_index("ix_client_sessions_expires_at", "client_sessions", ["expires_at"])

    # Services and projects
    op.create_table(
        "services",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "projects",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("status", sa.String(50), nullable=False, server_default="pending"),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("client_id", mysql.CHAR(36), nullable=True),
        sa.Column("service_id", mysql.CHAR(36), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=True, default=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projects_client_id", "projects", ["client_id"])

    op.create_table(
        "project_client_notes",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("project_id", mysql.CHAR(36), nullable=False),
        sa.Column("client_id", mysql.CHAR(36), nullable=False),
        sa.Column("note_text", sa.Text(), nullable=False),
        sa.Column("note_date", sa.Date(), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=True, default=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_project_client_notes_project_id", "project_client_notes", ["project_id"]
    )

    # Activity logs
    op.create_table(
        "activity_logs",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("module", sa.String(50), nullable=False),
        sa.Column("record_id", mysql.CHAR(36), nullable=True),
        sa.Column("record_title", sa.String(255), nullable=True),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("performed_by_user_id", mysql.CHAR(36), nullable=False),
        sa.Column("performed_by_name", sa.String(255), nullable=True),
        sa.Column("performed_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_activity_logs_module", "activity_logs", ["module"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("ix_activity_logs_module", table_name="activity_logs")
    op.drop_table("activity_logs")
    op.drop_index("ix_project_client_notes_project_id", table_name="project_client_notes")
    op.drop_table("project_client_notes")
    op.drop_index("ix_projects_client_id", table_name="projects")
    op.drop_table("projects")
    op.drop_table("services")
    op.drop_index("ix_client_sessions_expires_at", table_name="client_sessions")
    op.drop_index("ix_client_sessions_client_id", table_name="client_sessions")
    op.drop_table("client_sessions")
    op.drop_table("client_auth")
    op.drop_table("clients")
    op.drop_table("user_roles")
    op.drop_table("users")
