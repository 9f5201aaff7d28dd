"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from src.catalog.runtime.config.config_data import ConfigData
from src.catalog.runtime.context import get_config


class DbSessionService:
    def __init__(self, config: ConfigData | None = None):
        """Initialize the shared database engine and session factory."""

        logger.info("Setting up database engine and session factory")
        main_config = config or get_config()
        db_config = main_config.database
        connection_string = db_config.connection_string

        engine_kwargs = {
            "echo": db_config.echo,
            "echo_pool": False,
            "connect_args": self._get_connect_args(main_config),
        }

        if connection_string.startswith("sqlite"):
            if ":memory:" in connection_string or connection_string.endswith("://"):
                # One shared connection so every session sees the same database
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                    "pool_pre_ping": True,
                }
            )

        self._engine = create_engine(connection_string, **engine_kwargs)
        logger.info(
            "Database engine initialized for {} ({})",
            self._engine.url.render_as_string(hide_password=True),
            main_config.app.environment,
        )

    def _get_connect_args(self, config: ConfigData) -> dict:
        """Driver-specific connection arguments."""
        url = config.database.connection_string
        if url.startswith("postgresql"):
            return {
                "application_name": f"catalog_api_{config.app.environment}",
                "connect_timeout": 30,
            }
        if url.startswith("sqlite"):
            if config.app.environment == "production":
                logger.warning("SQLite is not supported in production; use PostgreSQL")
            return {"check_same_thread": False, "timeout": 20}
        return {}

    def create_all(self) -> None:
        """Create all database tables that do not exist yet."""
        from src.catalog.entities.core.user import UserTable  # noqa: F401
        from src.catalog.entities.service.product import ProductTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database tables created")

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager style helper for repositories and tests."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Database transaction failed")
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Database health check failed")
            return False

    def dispose(self) -> None:
        self._engine.dispose()
