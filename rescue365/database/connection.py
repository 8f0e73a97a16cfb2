"""
Database connection management for Rescue365
SQLite for local runs and tests, PostgreSQL (or any SQLAlchemy URL) otherwise.
"""

import os
import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from rescue365.core.config import settings
from .models import Base

logger = logging.getLogger(__name__)


def _create_engine(database_url: str, pool_size: int) -> Engine:
    echo = os.getenv("DB_ECHO", "false").lower() == "true"

    if make_url(database_url).get_backend_name() == "sqlite":
        # One shared connection keeps in-memory databases alive between sessions
        return create_engine(
            database_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=echo
        )

    return create_engine(
        database_url,
        pool_size=pool_size,
        pool_pre_ping=True,
        echo=echo
    )


class DatabaseConnection:
    """
    Engine and session factory for the rescue_reports database.

    Usage:
        db = DatabaseConnection("sqlite:///./rescue365.db")
        db.create_tables()
        with db.get_session() as session:
            session.add(record)
    """

    def __init__(self, database_url: Optional[str] = None, pool_size: int = 5):
        """
        Initialize database connection.

        Args:
            database_url: SQLAlchemy URL, defaults to DATABASE_URL
            pool_size: Pooled connections for server databases
        """
        self.database_url = database_url or settings.database_url
        self.engine = _create_engine(self.database_url, pool_size)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False
        )

        logger.info(f"Report database: {self._mask_url(self.database_url)}")

    @staticmethod
    def _mask_url(url: str) -> str:
        return make_url(url).render_as_string(hide_password=True)

    def create_tables(self) -> None:
        """Create the report tables if they do not exist."""
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create report tables: {e}")
            raise

    def drop_tables(self) -> None:
        """Drop the report tables."""
        Base.metadata.drop_all(bind=self.engine)
        logger.warning("Report tables dropped")

    def check_connection(self) -> bool:
        """True if the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Database unreachable: {e}")
            return False
        return True

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Transactional session: committed on exit, rolled back on database errors.

        Yields:
            SQLAlchemy session
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Report transaction rolled back: {e}")
            raise
        finally:
            session.close()

    def close(self) -> None:
        self.engine.dispose()


def init_db(database_url: Optional[str] = None) -> DatabaseConnection:
    """
    Connect to the report database and create its tables.

    Args:
        database_url: Optional database URL override

    Returns:
        DatabaseConnection instance
    """
    db = DatabaseConnection(database_url=database_url)
    db.create_tables()
    return db
