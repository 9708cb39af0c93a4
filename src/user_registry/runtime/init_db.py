"""Database initialization script."""

from src.user_registry.core.services.database.db_manage import DbManageService
from src.user_registry.core.services.database.db_session import DbSessionService
from src.user_registry.runtime.config.config_data import ConfigData


def init_db(config: ConfigData | None = None) -> None:
    """Create all database tables."""
    database_service = DbSessionService(config)
    try:
        DbManageService(database_service.engine).create_all()
    finally:
        database_service.dispose()


if __name__ == "__main__":
    init_db()
