"""Database module."""

from portal.db.database import SessionLocal, engine, init_db, transaction
from portal.db.models import (
    ActivityLog,
    AppRole,
    Base,
    Client,
    ClientCredential,
    ClientSession,
    Project,
    ProjectClientNote,
    Service,
    User,
    UserRoleAssignment,
)

__all__ = [
    "SessionLocal",
    "engine",
    "init_db",
    "transaction",
    "Base",
    "AppRole",
    "User",
    "UserRoleAssignment",
    "Client",
    "ClientCredential",
    "ClientSession",
    "Service",
    "Project",
    "ProjectClientNote",
    "ActivityLog",
]
