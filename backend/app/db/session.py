"""
Database Session Management Module
==================================

Responsible for:
- Creating the database engine
- Managing session lifecycle
- Providing dependency for FastAPI routes
- Connection pooling configuration

SQLite (the local development default) gets a thread-safe
connection setting and foreign key enforcement; other backends
get a validated connection pool.
"""

from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from app.core.config import settings
from app.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


# ==========================
# Database Engine
# ==========================

def build_engine(database_url: str) -> Engine:
    """
    Create an engine suited to the database backend.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        SQLAlchemy Engine
    """
    if database_url.startswith("sqlite"):
        sqlite_engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=settings.DEBUG,
        )

        @event.listens_for(sqlite_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """Enable foreign key constraints for SQLite."""
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return sqlite_engine

    return create_engine(
        database_url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,  # Validate connections before use
        echo=settings.DEBUG,
    )


engine = build_engine(settings.DATABASE_URL)


# ==========================
# Session Factory
# ==========================

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


# ==========================
# Dependency for FastAPI
# ==========================

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a database session.

    Ensures:
    - Session is opened per request
    - Session is properly closed after request completes
    - Transactions are rolled back on error

    Yields:
        SQLAlchemy Session object
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error("database_session_error", error=str(e))
        db.rollback()
        raise
    finally:
        db.close()


# ==========================
# Database Health Check
# ==========================

def check_database_connection() -> bool:
    """
    Check if database connection is healthy.

    Returns:
        True if connection is healthy, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return False
