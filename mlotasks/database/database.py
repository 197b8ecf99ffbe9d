"""Database engine helpers for the local key-value store.

This module supports both:
- Local SQLite (default)
- Any other SQLAlchemy URL via `MLO_DATABASE_URL`
"""

import os
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Base class for declarative models
Base = declarative_base()


def _is_sqlite_url(database_url: str) -> bool:
    return "sqlite" in (database_url or "")


def _is_memory_sqlite_url(database_url: str) -> bool:
    return _is_sqlite_url(database_url) and (":memory:" in database_url or database_url.rstrip("/") == "sqlite:")


def get_engine_kwargs(database_url: str) -> dict:
    """Return deterministic create_engine kwargs for a DB URL.

    This is separated to allow deterministic unit testing without connecting.
    """
    engine_kwargs: dict = {
        "echo": os.getenv("MLO_DB_ECHO", "False").lower() == "true",
        "pool_pre_ping": True,
    }

    if _is_sqlite_url(database_url):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite_url(database_url):
            # One shared connection, otherwise every session sees an empty database
            engine_kwargs["poolclass"] = StaticPool
        return engine_kwargs

    engine_kwargs["pool_size"] = int(os.getenv("MLO_DB_POOL_SIZE", "5"))
    engine_kwargs["max_overflow"] = int(os.getenv("MLO_DB_MAX_OVERFLOW", "5"))
    return engine_kwargs


def build_engine(database_url: str) -> Engine:
    engine = create_engine(database_url, **get_engine_kwargs(database_url))
    if _is_sqlite_url(database_url) and not _is_memory_sqlite_url(database_url):
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    """Enable WAL mode so readers are not blocked by the writer."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create the key-value table if it does not exist."""
    # Register models on Base.metadata before create_all
    from mlotasks.database import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
