"""Database configuration and session management.

The book store is optional: when no DATABASE_URL is configured there is no
engine, ``get_db`` yields None and every repository treats that as "store
unavailable".
"""

from collections.abc import Callable, Generator
from typing import Annotated

from fastapi import Depends
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookshelf.config import Settings, get_settings

# Returns a handle to the store, or None when the store is unavailable
SessionProvider = Callable[[], Session | None]


class Base(DeclarativeBase):
    """Base class for all database models."""


# Module-level singletons (application-scoped)
_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def initialize_database(settings: Settings) -> None:
    """Initialize database engine and session factory once at startup."""
    global _engine, _session_factory  # noqa: PLW0603

    if settings.DATABASE_URL is None:
        _engine = None
        _session_factory = None
        return

    if settings.DATABASE_URL.startswith("sqlite"):
        _engine = create_engine(
            settings.DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        _engine = create_engine(
            settings.DATABASE_URL,
            pool_size=20,
            max_overflow=30,
            pool_pre_ping=True,  # Verify connections before use
            pool_recycle=3600,
        )

    # Import models so their tables are registered on Base.metadata
    from bookshelf import models  # noqa: F401

    Base.metadata.create_all(bind=_engine)
    _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=_engine)


def get_session_factory(
    settings: Annotated[Settings, Depends(get_settings)],
) -> sessionmaker[Session] | None:
    """Get session factory (returns singleton, None without a store)."""
    if _session_factory is None and settings.store_configured:
        initialize_database(settings)
    return _session_factory


def dispose_engine() -> None:
    """Dispose database engine on shutdown."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None


def get_db(
    session_factory: Annotated[sessionmaker[Session] | None, Depends(get_session_factory)],
) -> Generator[Session | None, None, None]:
    """Get a request-scoped database session, or None when unavailable."""
    if session_factory is None:
        yield None
        return
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


# Type alias for database dependency
DatabaseSession = Annotated[Session | None, Depends(get_db)]
