"""Database initialization script."""

from src.catalog.core.services.database.db_session import DbSessionService


def init_db() -> None:
    """Create all database tables."""
    db_session_service = DbSessionService()
    try:
        db_session_service.create_all()
    finally:
        db_session_service.dispose()


if __name__ == "__main__":
    init_db()
