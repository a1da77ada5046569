"""Database engine, session and transaction configuration."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from portal.config import get_settings
from portal.exceptions import StoreError

logger = logging.getLogger(__name__)

settings = get_settings()

# Create engine with connection pooling
# SQLite doesn't support pool_size/max_overflow
engine_kwargs = {
    "echo": settings.debug,
}

if not settings.database_url.startswith("sqlite"):
    engine_kwargs.update(
        {
            "pool_pre_ping": True,
            "pool_size": 5,
            "max_overflow": 10,
        }
    )
else:
    engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(settings.database_url, **engine_kwargs)

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

_TX_DEPTH_KEY = "portal_tx_depth"


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Run a block of work as one committed unit.

    The outermost block commits on success. Nested blocks join the outer
    one, so grouped mutations become visible together or not at all.

    Args:
        db: Database session.

    Yields:
        Session: The same session.

    Raises:
        StoreError: If the database rejects any statement or the commit.
    """
    depth = db.info.get(_TX_DEPTH_KEY, 0)
    db.info[_TX_DEPTH_KEY] = depth + 1
    try:
        yield db
        if depth == 0:
            db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database operation failed: {e}")
        raise StoreError("Database operation failed") from e
    except Exception:
        if depth == 0:
            db.rollback()
        raise
    finally:
        db.info[_TX_DEPTH_KEY] = depth


def init_db() -> None:
    """Initialize database tables.

    Creates all tables defined in models if they don't exist.
    In production, use Alembic migrations instead.
    """
    from portal.db.models import Base

    # Only create tables in development; use Alembic in production
    if settings.debug:
        Base.metadata.create_all(bind=engine)
