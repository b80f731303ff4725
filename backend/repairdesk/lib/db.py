"""
Database engine and session management using SQLAlchemy 2.x.
The document store keeps every collection in a single table, so this module
only has to hand out engines and session factories for it.
"""
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

from repairdesk.lib.logging import get_logger


logger = get_logger(__name__)


# Base class for all SQLAlchemy models
class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    SQLite URLs (used by tests and local demos) share one connection across
    threads so an in-memory database survives for the life of the engine.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=10,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to `engine`."""
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def init_db(engine: Engine) -> None:
    """
    Create all tables.
    Should be called after all models are imported.
    """
    import repairdesk.models  # noqa: F401  (registers tables with Base.metadata)

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured", extra={"dialect": engine.dialect.name})


def drop_db(engine: Optional[Engine]) -> None:
    """
    Drop all tables. Use with caution - for testing only.
    """
    if engine is not None:
        Base.metadata.drop_all(bind=engine)
