"""
Database Service for Interprep

Owns the SQLAlchemy engine and session factory. An instance is created once by
the application lifespan, stored on ``app.state`` and handed to request
handlers through the ``get_db`` dependency, so tests can build their own
instance against an in-memory database.
"""
from typing import Any, Dict, Generator, Optional
from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from app.config import Settings, get_settings
from app.database.models import Base
from app.utils.datetime_utils import isoformat, utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)


def is_in_memory_sqlite(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite+pysqlite://") or ":memory:" in database_url


class DatabaseService:
    """Engine and session management with explicit initialize/dispose."""

    def __init__(self, settings: Optional[Settings] = None, database_url: Optional[str] = None):
        self.settings = settings or get_settings()
        self.database_url = database_url or self.settings.DATABASE_URL
        self._engine: Optional[Engine] = None
        self._session_factory = None
        self._initialized = False

    def initialize(self, create_tables: bool = True):
        """Create the engine, the session factory and (optionally) missing tables."""
        if self._initialized:
            return

        self._engine = self._create_engine()
        self._session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self._engine
        )
        self._initialized = True

        if create_tables:
            self.create_tables()
        logger.info("✅ Database service initialized successfully")

    def _create_engine(self) -> Engine:
        """Create the database engine for the configured URL."""
        if is_in_memory_sqlite(self.database_url):
            # One shared connection, otherwise every session sees an empty database
            return create_engine(
                self.database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=self.settings.DATABASE_ECHO
            )
        if self.database_url.startswith("sqlite"):
            return create_engine(
                self.database_url,
                connect_args={"check_same_thread": False},
                echo=self.settings.DATABASE_ECHO
            )
        return create_engine(
            self.database_url,
            echo=self.settings.DATABASE_ECHO,
            pool_pre_ping=True,
            pool_size=self.settings.DATABASE_POOL_SIZE,
            max_overflow=self.settings.DATABASE_MAX_OVERFLOW,
            pool_timeout=self.settings.DATABASE_POOL_TIMEOUT,
            pool_recycle=self.settings.DATABASE_POOL_RECYCLE
        )

    @property
    def engine(self) -> Engine:
        if not self._initialized:
            raise RuntimeError("DatabaseService.initialize() has not been called")
        return self._engine

    def get_session(self) -> Session:
        """Open a new ORM session."""
        if not self._initialized:
            raise RuntimeError("DatabaseService.initialize() has not been called")
        return self._session_factory()

    def session_scope(self) -> Generator[Session, None, None]:
        """Yield a session and always close it; roll back if the caller raised."""
        session = self.get_session()
        try:
            yield session
        except Exception as e:
            session.rollback()
            logger.error(f"❌ Database session error: {e}")
            raise
        finally:
            session.close()

    def create_tables(self):
        """Create all database tables."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("✅ Database tables created successfully")

    def health_check(self) -> Dict[str, Any]:
        """Check database connectivity."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return {
                "status": "healthy",
                "timestamp": isoformat(utcnow())
            }
        except (SQLAlchemyError, RuntimeError) as e:
            logger.error(f"❌ Database health check failed: {e}")
            return {
                "status": "unhealthy",
                "error": str(e),
                "timestamp": isoformat(utcnow())
            }

    def dispose(self):
        """Close all pooled connections."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("✅ Database connections closed")
        self._engine = None
        self._session_factory = None
        self._initialized = False


def get_database_service(request: Request) -> DatabaseService:
    """FastAPI dependency returning the application's database service."""
    return request.app.state.database_service


def get_db(request: Request) -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped database session."""
    yield from get_database_service(request).session_scope()
