"""
Registry database: one process-wide engine, short-lived sessions.

SQLite serves single-office installs and the test suite; PostgreSQL
serves the shared deployment, pooled per DB_POOL_SIZE / DB_MAX_OVERFLOW.
The URL comes from DATABASE_URL unless configure_database() overrides it.
"""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session

from cndes.config.settings import get_settings
from cndes.infrastructure.db.models import Base

logger = logging.getLogger(__name__)

# ── Global engine & session factory ──
_database_url = None
_engine = None
_SessionFactory = None


def get_database_url() -> str:
    """Database URL currently in use (explicitly configured or from settings)."""
    return _database_url or get_settings().database_url


def is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def create_db_engine(url: str = None, pool_size: int = None, max_overflow: int = None):
    """
    Engine for the registry database.

    SQLite connections are shared across the server's worker threads.
    Server databases get a bounded pool that is pinged before use, so
    connections dropped by the server between requests are replaced.
    """
    db_url = url or get_database_url()
    if is_sqlite(db_url):
        return create_engine(db_url, connect_args={"check_same_thread": False})

    settings = get_settings()
    return create_engine(
        db_url,
        pool_size=settings.db_pool_size if pool_size is None else pool_size,
        max_overflow=settings.db_max_overflow if max_overflow is None else max_overflow,
        pool_pre_ping=True,
    )


def describe_database(url: str = None) -> str:
    """Backend name reported by /health and the CLI."""
    return "SQLite" if is_sqlite(url or get_database_url()) else "PostgreSQL"


def safe_database_url(url: str = None) -> str:
    """URL with the password masked, for logs."""
    return make_url(url or get_database_url()).render_as_string(hide_password=True)


def configure_database(url: str) -> None:
    """Points the global engine at another database (app factory, tests, CLI)."""
    global _database_url, _engine, _SessionFactory
    if _engine is not None:
        _engine.dispose()
    _database_url = url
    _engine = None
    _SessionFactory = None


def get_engine():
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _SessionFactory


def init_db():
    """Creates the registry tables that are missing."""
    Base.metadata.create_all(get_engine())
    logger.info(f"Database initialized: {safe_database_url()}")


@contextmanager
def get_db() -> Session:
    """One unit of work: commits on success, rolls back on any error."""
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
