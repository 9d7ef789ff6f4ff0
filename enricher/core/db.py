"""Database connection and session management."""

import logging
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from enricher.core.config import settings

logger = logging.getLogger(__name__)

# Lazy database initialization - don't create engine at import time
engine: Engine | None = None
session_factory: sessionmaker[Session] | None = None


def _normalize_url(database_url: str) -> str:
    """Point bare postgres URLs at the psycopg (v3) driver."""
    if database_url.startswith("postgresql+psycopg2://"):
        return database_url.replace("postgresql+psycopg2://", "postgresql+psycopg://", 1)
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+psycopg://", 1)
    return database_url


def _initialize_database() -> None:
    """Initialize database engine and session factory."""
    global engine, session_factory

    if engine is not None:
        return  # Already initialized

    engine = create_engine(
        _normalize_url(settings.DATABASE_URL),
        pool_size=settings.MAX_CONNECTIONS,
        pool_pre_ping=True,  # Verify connections before using
        pool_recycle=3600,  # Recycle connections after 1 hour
        echo=False,
    )
    session_factory = sessionmaker(
        bind=engine, autoflush=False, expire_on_commit=False
    )
    logger.debug("Database engine initialized")


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Create and manage a database session.

    Yields:
        Database session
    """
    _initialize_database()

    if session_factory is None:
        raise RuntimeError("Database not initialized - cannot create session")

    session = session_factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
