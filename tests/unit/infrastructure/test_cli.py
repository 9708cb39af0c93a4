"""Tests for the operational CLI."""

from pathlib import Path

import pytest
from sqlalchemy import inspect
from sqlmodel import select
from typer.testing import CliRunner

from src.user_registry.cli import app
from src.user_registry.core.services import DbSessionService
from src.user_registry.entities.core.user import UserTable
from src.user_registry.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    DatabaseConfig,
)
from src.user_registry.runtime.context import get_config, with_context

runner = CliRunner()


@pytest.fixture
def file_database(tmp_path: Path):
    config = ConfigData(
        app=AppConfig(environment="test"),
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'users.db'}"),
    )
    with with_context(config):
        yield get_config()


def test_init_db_creates_tables(file_database: ConfigData):
    result = runner.invoke(app, ["init-db"])

    assert result.exit_code == 0, result.output
    assert "Tables ready on sqlite" in result.output

    service = DbSessionService(file_database)
    try:
        assert "users" in inspect(service.engine).get_table_names()
    finally:
        service.dispose()


def test_init_db_reset_requires_confirmation(file_database: ConfigData):
    runner.invoke(app, ["init-db"])
    service = DbSessionService(file_database)
    with service.session_scope() as session:
        session.add(UserTable(name="Taro", email="taro@example.com"))

    aborted = runner.invoke(app, ["init-db", "--reset"], input="n\n")
    with service.session_scope() as session:
        kept = session.exec(select(UserTable)).all()

    confirmed = runner.invoke(app, ["init-db", "--reset"], input="y\n")
    with service.session_scope() as session:
        remaining = session.exec(select(UserTable)).all()
    service.dispose()

    assert aborted.exit_code == 1
    assert len(kept) == 1
    assert confirmed.exit_code == 0, confirmed.output
    assert remaining == []


def test_no_arguments_prints_help():
    result = runner.invoke(app, [])

    assert "init-db" in result.output
    assert "serve" in result.output
