"""
SQLite engine and session management for podbrief.

- Session-per-operation pattern: every status write and upsert commits on its own
- NullPool connection pooling to avoid SQLite locking issues
- SQLite connection settings (WAL mode, foreign keys, busy timeout)
- Engine built lazily from DATABASE_URL, or explicitly with configure_database()
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional
from urllib.parse import urlparse

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError, OperationalError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool

from podbrief.config import load_settings
from podbrief.errors import ConfigurationError
from podbrief.logger import setup_logging, log_function
from .models import Base


db_logger = setup_logging(logger_name="database", log_file="database.log")

engine: Optional[Engine] = None
SessionLocal = sessionmaker(autoflush=False, expire_on_commit=False)


def validate_database_url(url: Optional[str]) -> tuple[bool, str]:
    """
    Validate the database URL format and path.

    Returns:
        (True, database file path) when valid, (False, reason) otherwise.
    """
    if not url:
        return False, "DATABASE_URL is empty"
    try:
        parsed = urlparse(url)
    except ValueError as e:
        return False, f"Invalid database URL format: {e}"

    if parsed.scheme != "sqlite":
        return False, f"Only SQLite databases are supported, got: {parsed.scheme}"

    # sqlite:///relative.db -> "relative.db", sqlite:////abs/file.db -> "/abs/file.db"
    db_path = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
    if not db_path:
        return False, "Database file path is empty"

    parent_dir = Path(db_path).parent
    if not parent_dir.exists():
        return False, f"Database directory does not exist: {parent_dir}"

    return True, db_path


def optimize_sqlite_connection(dbapi_connection, connection_record):
    """Apply SQLite settings when a connection is created."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=30000")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


def configure_database(
    database_url: Optional[str] = None, create_dirs: bool = False
) -> Engine:
    """
    Create the engine for database_url (default: DATABASE_URL) and bind sessions to it.

    Args:
        database_url: SQLite URL, read from settings when None
        create_dirs: Create the database directory when missing

    Raises:
        ConfigurationError: If the URL is not a usable SQLite URL
    """
    global engine

    url = database_url or load_settings().database_url
    if create_dirs and url.startswith("sqlite:///"):
        parsed_path = urlparse(url).path
        db_path = parsed_path[1:] if parsed_path.startswith("/") else parsed_path
        if db_path:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    is_valid, db_info = validate_database_url(url)
    if not is_valid:
        db_logger.error(f"Database configuration error: {db_info}")
        raise ConfigurationError(f"Database configuration error: {db_info}")

    new_engine = create_engine(
        url,
        poolclass=NullPool,
        echo=False,
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    event.listen(new_engine, "connect", optimize_sqlite_connection)

    if engine is not None:
        engine.dispose()
    engine = new_engine
    SessionLocal.configure(bind=engine)

    db_logger.info(f"Database configured: {db_info}")
    return engine


def get_engine() -> Engine:
    if engine is None:
        configure_database()
    return engine


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions (session-per-operation pattern).

    Rolls back on error and always closes the session. Callers commit.

    Usage:
        with get_db_session() as session:
            session.add(creator)
            session.commit()
    """
    get_engine()
    session = SessionLocal()
    try:
        db_logger.debug("Database session created")
        yield session

    except OperationalError as e:
        db_logger.error(f"Database operational error: {e}")
        session.rollback()
        error_msg = str(e.orig) if getattr(e, "orig", None) is not None else str(e)
        if "no such table" in error_msg.lower():
            raise ConfigurationError(
                "Database table does not exist. Run `python -m podbrief.db init` first."
            ) from e
        raise

    except SQLAlchemyError as e:
        db_logger.error(f"Database error: {e}")
        session.rollback()
        raise

    except Exception:
        session.rollback()
        raise

    finally:
        session.close()
        db_logger.debug("Database session closed")


@log_function(logger_name="database", log_execution_time=True)
def check_database_connection() -> bool:
    """Return True if a trivial query succeeds."""
    try:
        with get_db_session() as session:
            session.execute(text("SELECT 1"))
        db_logger.info("Database connection test successful")
        return True
    except Exception as e:
        db_logger.error(f"Database connection test failed: {e}")
        return False


@log_function(logger_name="database", log_execution_time=True)
def init_database() -> None:
    """Create all tables defined in the models (no-op for existing tables)."""
    Base.metadata.create_all(bind=get_engine())
    db_logger.info("Database tables created successfully")


def get_database_info() -> dict:
    """Describe the configured database file."""
    current = get_engine()
    db_path = validate_database_url(str(current.url))[1]
    info = {
        "database_url": str(current.url),
        "database_path": db_path,
        "engine_pool_class": current.pool.__class__.__name__,
        "file_exists": os.path.exists(db_path),
    }
    if info["file_exists"]:
        file_stats = os.stat(db_path)
        info["file_size_bytes"] = file_stats.st_size
        info["file_size_mb"] = round(file_stats.st_size / (1024 * 1024), 2)
    return info
