# File: asset_admin/db/session.py
"""
Engine and session factory for the asset inventory database.

``get_db`` is the request-scoped session dependency; ``init_db`` creates any
missing tables at startup.
"""

import logging
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker

from asset_admin.core.config import settings
from asset_admin.db.models import Base

logger = logging.getLogger(__name__)


def _build_engine(database_url: str):
    """Create the engine, enabling foreign keys for SQLite connections."""
    is_sqlite = database_url.startswith("sqlite")

    new_engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False} if is_sqlite else {},
        pool_pre_ping=True,
        echo=settings.DEBUG,
    )

    if is_sqlite:

        @event.listens_for(new_engine, "connect")
        def enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON;")
            cursor.close()

    return new_engine


logger.info(f"Creating SQLAlchemy engine for {settings.DATABASE_URL}")
engine = _build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Yield a session for one request and close it afterwards.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Request session failed: {e}")
        raise
    finally:
        db.close()


def verify_db_connection() -> bool:
    """
    Run ``SELECT 1`` against the engine.

    Returns:
        True when the database answers, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
    return True


def init_db(reset: bool = False) -> bool:
    """
    Create the schema.

    Args:
        reset: Drop every table first

    Returns:
        True when the schema is in place, False otherwise
    """
    if not verify_db_connection():
        return False

    try:
        if reset:
            logger.warning("Dropping all tables")
            Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.exception(f"Schema creation failed: {e}")
        return False

    logger.info(f"Database schema ready ({len(Base.metadata.tables)} tables)")
    return True
