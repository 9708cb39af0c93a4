"""Schema creation for the tables this service owns."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

# Imported for its side effect of registering the table with the metadata
from src.user_registry.entities.core.user.table import UserTable  # noqa: F401


class DbManageService:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_all(self) -> None:
        """Create all database tables that do not exist yet."""
        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        """Drop every table this service owns."""
        SQLModel.metadata.drop_all(self._engine)
        logger.warning("Dropped all database tables.")
