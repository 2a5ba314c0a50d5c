"""Core database functionality and configuration.

This module owns the SQLAlchemy engine and its connection pool, the
session scope used by the event store, and the adapter-level error kinds
that storage failures are translated into.
"""

from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Optional, Dict, Any, Generator
import os

from sqlalchemy import create_engine, Engine, inspect, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..models import Base
from ..config.environment import IS_PRODUCTION_ENVIRONMENT
from ..utils.deadline import Deadline

logger = logging.getLogger(__name__)

class DatabaseConfig:
    """Database configuration settings."""

    def __init__(
        self,
        url: Optional[str] = None,
        sqlite_path: Optional[Path] = None,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 5,
        pool_recycle: int = 300,
        pool_pre_ping: bool = True
    ):
        """
        Initialize database configuration.

        In production environment, DATABASE_URL must be set in environment variables
        or provided explicitly via the url parameter. In development the same
        variable is honoured, falling back to a local SQLite file.

        Args:
            url: Database connection URL; defaults to the DATABASE_URL env variable
            sqlite_path: Path to SQLite database file (development fallback)
            echo: Whether to echo SQL statements
            pool_size: Size of the connection pool (permanent connections)
            max_overflow: Maximum number of extra connections to allow temporarily
                        (total connections = pool_size + max_overflow)
            pool_timeout: Seconds to wait for an available connection
            pool_recycle: Seconds before connections are recycled (prevent stale)
            pool_pre_ping: Whether to ping connections before using them

        Raises:
            ValueError: If in production environment and no database URL is provided
        """
        self.url = url or os.environ.get('DATABASE_URL')
        if IS_PRODUCTION_ENVIRONMENT and not self.url:
            raise ValueError(
                "Database URL must be provided either via url parameter "
                "or DATABASE_URL environment variable when in production environment"
            )
        if not self.url:
            self.sqlite_path = sqlite_path or Path(__file__).parent.parent.parent / 'data' / 'events.db'
        else:
            self.sqlite_path = None

        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.pool_pre_ping = pool_pre_ping

    @property
    def connection_url(self) -> str:
        """Get the database connection URL."""
        if self.url:
            # Plain postgres URLs are routed to the psycopg (v3) driver
            if self.url.startswith('postgres://'):
                return 'postgresql+psycopg://' + self.url[len('postgres://'):]
            if self.url.startswith('postgresql://'):
                return 'postgresql+psycopg://' + self.url[len('postgresql://'):]
            return self.url
        if not self.sqlite_path:
            raise ValueError("SQLite path not configured")
        return f"sqlite:///{self.sqlite_path}"

    @property
    def is_sqlite(self) -> bool:
        return self.connection_url.startswith('sqlite')

    def get_engine_args(self) -> Dict[str, Any]:
        """Get SQLAlchemy engine arguments based on configuration."""
        args = {"echo": self.echo}

        # SQLite-specific configuration
        if self.is_sqlite:
            args["connect_args"] = {"check_same_thread": False}
            args["poolclass"] = StaticPool

        # PostgreSQL-specific configuration
        else:
            args.update({
                "pool_size": self.pool_size,
                "max_overflow": self.max_overflow,
                "pool_timeout": self.pool_timeout,
                "pool_recycle": self.pool_recycle,
                "pool_pre_ping": self.pool_pre_ping
            })

        return args

class DatabaseError(Exception):
    """Base exception for database-related errors."""
    kind = 'unknown'

class ConnectionFailureError(DatabaseError):
    """Raised when the database cannot be reached or the connection breaks."""
    kind = 'connection_failure'

class ConstraintViolationError(DatabaseError):
    """Raised when a statement violates a constraint, e.g. a duplicate id."""
    kind = 'constraint_violation'

class StorageTimeoutError(DatabaseError):
    """Raised when a storage call does not finish before its deadline."""
    kind = 'timeout'

class UnknownStorageError(DatabaseError):
    """Raised for any other storage failure."""
    kind = 'unknown'

class Database:
    """Owns the engine and hands out short-lived sessions."""

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self.config = config or DatabaseConfig()
        self.engine: Optional[Engine] = None
        self._session_factory = sessionmaker(expire_on_commit=False)
        self._setup_engine()

    def _setup_engine(self) -> None:
        """Set up the SQLAlchemy engine."""
        try:
            if self.config.sqlite_path:
                self.config.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
            self.engine = create_engine(
                self.config.connection_url,
                **self.config.get_engine_args()
            )
            self._session_factory.configure(bind=self.engine)
        except Exception as e:
            raise ConnectionFailureError(f"Failed to create database engine: {e}") from e

    @property
    def supports_statement_timeout(self) -> bool:
        return self.engine is not None and self.engine.dialect.name == 'postgresql'

    def ensure_tables_exist(self) -> None:
        """Create the events table if it is missing."""
        if not self.engine:
            raise ConnectionFailureError("Database engine not initialized")

        try:
            inspector = inspect(self.engine)
            existing_tables = inspector.get_table_names()
            required_tables = set(Base.metadata.tables)

            if not required_tables.issubset(existing_tables):
                logger.info("Some tables missing, initializing database schema")
                Base.metadata.create_all(self.engine)
                logger.info("Database schema initialized successfully")
        except Exception as e:
            raise DatabaseError(f"Failed to verify/create database schema: {e}") from e

    @contextmanager
    def session(self, deadline: Deadline) -> Generator[Session, None, None]:
        """
        Provide a transactional scope bounded by a deadline.

        A connection is checked out of the pool for the duration of the
        block only. On PostgreSQL the remaining time is installed as a
        transaction-local statement_timeout, so the server abandons the
        statement if the caller has already given up on it.

        Raises:
            StorageTimeoutError: If the deadline has already passed
        """
        if deadline.expired:
            raise StorageTimeoutError("deadline exceeded before the database call started")

        session = self._session_factory()
        try:
            if self.supports_statement_timeout:
                timeout_ms = max(1, int(deadline.remaining() * 1000))
                session.execute(
                    text("SELECT set_config('statement_timeout', :timeout, true)"),
                    {"timeout": str(timeout_ms)}
                )
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Close every pooled connection."""
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connection pool closed")
