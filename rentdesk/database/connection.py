"""
Database engine and session management.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..core.config import settings
from .base import Base

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Owns the engine and the session factory."""

    def __init__(self, database_url: str = None, echo: bool = False):
        self.database_url = database_url or settings.DATABASE_URL
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = self._create_engine()
            self._session_factory = sessionmaker(
                bind=self._engine, autoflush=False, expire_on_commit=False
            )
        return self._engine

    def _create_engine(self) -> Engine:
        if self.database_url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in self.database_url or self.database_url == "sqlite://":
                kwargs["poolclass"] = StaticPool
            engine = create_engine(self.database_url, echo=self.echo, **kwargs)

            # SQLite ignores foreign keys unless asked
            @event.listens_for(engine, "connect")
            def _enable_foreign_keys(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

            return engine

        return create_engine(
            self.database_url,
            echo=self.echo,
            pool_pre_ping=True,
            pool_size=10,
            max_overflow=20,
        )

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self.engine  # builds the factory too
        return self._session_factory

    def create_tables(self):
        from . import models  # noqa: F401  registers all tables
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self):
        from . import models  # noqa: F401
        Base.metadata.drop_all(bind=self.engine)

    def get_session_direct(self) -> Session:
        """Plain session; the caller must close it."""
        return self.session_factory()

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Transactional scope: commit on success, rollback on error."""
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self):
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None


db = DatabaseConnection(echo=settings.DATABASE_ECHO)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped session."""
    session = db.get_session_direct()
    try:
        yield session
    finally:
        session.close()


def init_db():
    """Create all tables."""
    db.create_tables()
    logger.info("Database tables ensured")


def reset_db():
    """Drop and recreate all tables. Destroys all data."""
    db.drop_tables()
    db.create_tables()
    logger.warning("Database reset")
