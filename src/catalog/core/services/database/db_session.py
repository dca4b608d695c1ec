"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from src.catalog.core.exceptions import ConnectionBootstrapError
from src.catalog.runtime.config.config_data import DatabaseConfig
from src.catalog.runtime.context import get_config


class DbSessionService:
    """Owns the shared engine and hands out per-request sessions.

    Built once by the application factory. Tests pass a prebuilt ``engine``
    (usually in-memory SQLite) instead of a configuration.
    """

    def __init__(
        self,
        db_config: DatabaseConfig | None = None,
        engine: Engine | None = None,
    ) -> None:
        self._config = db_config or get_config().database

        if engine is None:
            logger.info("Setting up database engine for backend: {}", self._config.backend)
            engine = create_engine(
                self._config.connection_string, **self._engine_kwargs()
            )
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def _engine_kwargs(self) -> dict[str, Any]:
        """Get backend-specific engine arguments."""
        kwargs: dict[str, Any] = {
            "echo": self._config.echo,
            "pool_pre_ping": True,  # Validate connections before use
        }

        if self._config.backend == "sqlite":
            kwargs["connect_args"] = {
                "check_same_thread": False,  # Sessions cross FastAPI worker threads
                "timeout": 20,  # Lock timeout
            }
        else:
            kwargs.update(
                {
                    "pool_size": self._config.pool_size,
                    "max_overflow": self._config.max_overflow,
                    "pool_timeout": self._config.pool_timeout,
                    "pool_recycle": self._config.pool_recycle,
                }
            )
            if self._config.backend == "postgresql":
                kwargs["connect_args"] = {
                    "application_name": "catalog_api",
                    "connect_timeout": 30,
                }
        return kwargs

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(self._engine, expire_on_commit=False)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager style helper for scripts and tests."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.bind(error_type=type(e).__name__).error("Database transaction failed")
            raise
        finally:
            db.close()

    def create_all(self) -> None:
        """Create all database tables."""
        from src.catalog.entities.service.product import ProductTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def connect(self) -> None:
        """Verify the store is reachable and, if configured, create the schema.

        Raises:
            ConnectionBootstrapError: the store could not be reached.
        """
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            if self._config.create_tables:
                self.create_all()
        except SQLAlchemyError as e:
            raise ConnectionBootstrapError("Error trying to connect") from e

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            logger.bind(error_type=type(e).__name__).error("Database health check failed")
            return False

    def dispose(self) -> None:
        self._engine.dispose()
