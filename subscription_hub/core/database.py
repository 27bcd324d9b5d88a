"""
Database configuration and connection management.

This module provides:
- SQLAlchemy engine construction with sane pooling defaults (static pool for SQLite)
- Transactional session scope
- Test database support
- The registry_entries table backing the SQL store
"""
from typing import Optional
from contextlib import contextmanager
from sqlalchemy import create_engine, MetaData, Table, Column, String, LargeBinary, Text, PrimaryKeyConstraint, select
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool, StaticPool
import logging
import os

from subscription_hub.core.config import settings


logger = logging.getLogger("subscription_hub")

# SQLAlchemy metadata for table definitions
metadata = MetaData()

# Connection pooling configuration
POOL_SIZE = 10
MAX_OVERFLOW = 20
POOL_TIMEOUT = 30
POOL_RECYCLE = 3600  # Recycle connections after 1 hour


def get_database_url() -> Optional[str]:
    """
    Get the database URL from settings or environment.

    For testing, use TEST_DATABASE_URL if available.
    """
    test_url = os.getenv("TEST_DATABASE_URL") or settings.TEST_DATABASE_URL
    if test_url:
        return test_url

    return os.getenv("DATABASE_URL") or settings.DATABASE_URL


def build_engine(url: str) -> Engine:
    """Create an engine for ``url``; SQLite gets a single shared connection."""
    if url.startswith("sqlite"):
        return create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_timeout=POOL_TIMEOUT,
        pool_recycle=POOL_RECYCLE,
        echo=False,  # Set to True for SQL query logging
    )


@contextmanager
def get_db_session(session_factory):
    """
    Context manager for database sessions.

    Commits when the block exits cleanly, rolls back on any exception.

    Usage:
        with get_db_session(SessionLocal) as session:
            session.execute(...)
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_all_tables(engine: Engine):
    """
    Create all tables defined in metadata.

    This is idempotent - tables that already exist will not be recreated.
    """
    metadata.create_all(bind=engine)


def check_connection(engine: Engine) -> bool:
    """
    Check if database connection is available.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(select(1))
        return True
    except Exception as e:
        logger.warning(f"Database connection check failed: {e}")
        return False


# Every registry namespace (counters, records, indexes) lives in one keyed table.
# Keys are order-preserving byte strings so range scans sort like the keys do.
registry_entries = Table(
    'registry_entries',
    metadata,
    Column('namespace', String(64), nullable=False),
    Column('key', LargeBinary, nullable=False),
    Column('value', Text, nullable=False),
    PrimaryKeyConstraint('namespace', 'key', name='pk_registry_entries'),
)
