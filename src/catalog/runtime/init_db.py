"""Database initialization script."""

from src.catalog.core.services import DbSessionService
from src.catalog.runtime.context import get_config


def init_db(database_service: DbSessionService | None = None) -> None:
    """Create all database tables for the configured database."""
    service = database_service or DbSessionService(get_config().database)
    service.create_all()


if __name__ == "__main__":
    init_db()
