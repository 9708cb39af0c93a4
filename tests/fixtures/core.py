from __future__ import annotations

from collections.abc import Generator

import pytest
from sqlalchemy import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from src.user_registry.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    DatabaseConfig,
)


@pytest.fixture
def test_config() -> ConfigData:
    """Configuration pointing at a private in-memory database."""
    return ConfigData(
        app=AppConfig(environment="test"),
        database=DatabaseConfig(url="sqlite://"),
    )


@pytest.fixture
def session() -> Generator[Session]:
    """Create a fresh database session for testing."""
    # A unique engine per test gives every test an empty database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import models to register them with the metadata
    from src.user_registry.entities.core.user import UserTable  # noqa: F401

    SQLModel.metadata.create_all(engine)

    with Session(engine, expire_on_commit=False) as session:
        try:
            yield session
        finally:
            session.rollback()
    engine.dispose()
