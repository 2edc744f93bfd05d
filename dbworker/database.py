"""SQLAlchemy engine and session management."""

import logging
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from .config import DatabaseConfig

logger = logging.getLogger(__name__)


def create_store_engine(db_url: str, echo: Optional[bool] = None) -> Engine:
    """Create an engine owned by a single store."""
    if echo is None:
        echo = DatabaseConfig.is_echo_enabled()

    connect_args = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # SQLite specific

    engine = create_engine(
        db_url,
        echo=echo,
        pool_pre_ping=True,
        connect_args=connect_args
    )

    if engine.dialect.name == "sqlite":
        # Enable foreign key support for SQLite
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA journal_mode=WAL")  # Better concurrency
            cursor.close()

    return engine


def create_store_session(engine: Engine) -> Session:
    """Create the session a store uses for its whole lifetime.

    Instances stay readable after commit, and nothing is flushed until a
    transaction commits.
    """
    return Session(
        bind=engine,
        autoflush=False,
        expire_on_commit=False
    )


def init_database(profile: Optional[str] = None) -> str:
    """Initialize the database, creating all tables.

    Returns:
        The URL of the initialized database
    """
    from .models import Base

    db_url = DatabaseConfig.get_db_url(profile)
    engine = create_store_engine(db_url)
    try:
        Base.metadata.create_all(engine)
    finally:
        engine.dispose()
    logger.info("Initialized schema at %s", engine.url)
    return db_url
