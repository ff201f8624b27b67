"""
Database configuration for durable request history.

Uses SQLAlchemy ORM; SQLite is the default backend.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def create_db_engine(database_url: str) -> Engine:
    """
    Create an engine for the given database URL.

    SQLite connections are allowed to cross threads, which FastAPI's
    threadpool requires.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(database_url, connect_args=connect_args, echo=False)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Return a session factory bound to the engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """
    Initialize the database by creating all tables.

    Called at application startup when the SQL history backend is selected.
    It will create tables if they don't exist.
    """
    # Registers the history table on Base.metadata
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
