"""
Database connection and session management for RunLedger.

Provides:
- get_engine(): Lazily created SQLAlchemy engine
- get_db(): Context manager for DB sessions
- get_db_session(): Plain session (caller closes it)
- init_db(): Create tables (tests and local development only)
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .config import Settings
from .models import Base

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Return the process engine, creating it on first use.

    Raises:
        ValueError: If no URL is given and DATABASE_URL is not set
    """
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    url = database_url or Settings.from_env().database_url
    if not url:
        raise ValueError(
            "DATABASE_URL environment variable not set. "
            "Please configure it in .env file."
        )

    # pool_pre_ping=True ensures connections are valid before using them
    _engine = create_engine(url, pool_pre_ping=True, echo=False)
    _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _engine


def reset_engine() -> None:
    """Dispose the cached engine (used by tests that switch databases)"""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


def init_db(engine: Optional[Engine] = None) -> None:
    Base.metadata.create_all(engine or get_engine())


@contextmanager
def get_db() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Usage:
        with get_db() as db:
            service = build_query_service(db)
            page = service.find_range_with_count(query)

    The session is automatically closed when exiting the context,
    and rolled back if an exception occurs.
    """
    db = get_db_session()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_db_session() -> Session:
    """
    Get a new database session (without context manager).

    Note: You must manually close the session after use.
    Prefer using get_db() context manager when possible.
    """
    get_engine()
    return _session_factory()
