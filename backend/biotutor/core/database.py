"""
Database configuration and session management for BioTutor.

Sets up SQLAlchemy engine, session factory, and base model.
"""

from typing import Generator
from sqlalchemy import create_engine, MetaData, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
import logging

from .config import settings


# Configure logging
logger = logging.getLogger(__name__)


# SQLAlchemy metadata conventions for better constraint naming
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=convention)


def build_engine(database_url: str, echo: bool = False):
    """
    Create an engine for the given URL.

    SQLite URLs get ``check_same_thread`` disabled because FastAPI runs
    sync dependencies in a threadpool; in-memory SQLite also shares a
    single connection so every session sees the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=20,
        echo=echo,
    )


# Create engine based on environment
if settings.TESTING:
    engine = build_engine("sqlite:///:memory:")
else:
    engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)


# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


# Base class for models
Base = declarative_base(metadata=metadata)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get database session.

    The session is closed on every path out of the request, including
    errors raised by the handler.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_database_connection() -> bool:
    """
    Check if database is accessible.

    Returns:
        bool: True if database is accessible, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed: {e}")
        return False


class DatabaseManager:
    """
    Database manager for handling schema operations.
    """

    @staticmethod
    def create_all_tables(bind=None):
        """Create all database tables."""
        # Import models to ensure they're registered
        from biotutor import models  # noqa: F401

        Base.metadata.create_all(bind=bind or engine)
        logger.info("All database tables created successfully")

    @staticmethod
    def drop_all_tables(bind=None):
        """Drop all database tables. USE WITH CAUTION!"""
        Base.metadata.drop_all(bind=bind or engine)
        logger.warning("All database tables dropped")
