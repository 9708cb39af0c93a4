"""Unit tests for configuration loading and the runtime context."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from src.user_registry.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    DatabaseConfig,
)
from src.user_registry.runtime.config.config_template import (
    load_templated_yaml,
    parse_templated_yaml,
    substitute_env_vars,
)
from src.user_registry.runtime.config.settings import EnvironmentVariables
from src.user_registry.runtime.context import (
    AppContext,
    get_config,
    get_context,
    load_default_config,
    set_context,
    with_context,
)


class TestSubstituteEnvVars:
    """Test cases for substitute_env_vars function."""

    def test_substitute_simple_env_var(self):
        with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
            assert substitute_env_vars("${TEST_VAR}") == "test_value"

    def test_substitute_env_var_with_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${MISSING_VAR:-default_value}") == "default_value"

    def test_substitute_env_var_with_empty_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${MISSING_VAR:-}") == ""

    def test_substitute_required_env_var_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(
                ValueError, match="Required environment variable MISSING_VAR not set"
            ):
                substitute_env_vars("${MISSING_VAR}")

    def test_substitute_env_var_with_custom_error(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(
                ValueError,
                match="Required environment variable DB_URL: database is required",
            ):
                substitute_env_vars("${DB_URL:?database is required}")


class TestParseTemplatedYaml:
    YAML = """
config:
  app:
    environment: test
    port: ${APP_PORT:-9000}
  database:
    url: ${DATABASE_URL:-sqlite://}
"""

    def test_defaults_are_applied(self):
        with patch.dict(os.environ, {}, clear=True):
            config = parse_templated_yaml(self.YAML, "test")

        assert config.app.environment == "test"
        assert config.app.port == 9000
        assert config.database.url == "sqlite://"
        # Sections absent from the file fall back to model defaults
        assert config.logging.level == "INFO"

    def test_environment_prefixed_override(self):
        env = {"TEST_DATABASE_URL": "postgresql://registry@db:5432/users"}
        with patch.dict(os.environ, env, clear=True):
            config = parse_templated_yaml(self.YAML, "test")

        assert config.database.url == "postgresql://registry@db:5432/users"
        assert config.database.backend == "postgresql"

    def test_empty_document_rejected(self):
        with pytest.raises(ValueError, match="Failed to parse YAML"):
            parse_templated_yaml("", "test")

    def test_invalid_yaml_rejected(self):
        with pytest.raises(ValueError, match="Error parsing YAML"):
            parse_templated_yaml("config: [unclosed", "test")

    def test_invalid_values_rejected(self):
        with pytest.raises(ValueError, match="Invalid configuration"):
            parse_templated_yaml("config:\n  app:\n    port: not-a-port\n", "test")

    def test_load_from_file(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(self.YAML)

        with patch.dict(os.environ, {"APP_PORT": "8123"}, clear=True):
            config = load_templated_yaml(path, "test")

        assert config.app.port == 8123


class TestDefaultConfig:
    def test_missing_file_falls_back_to_defaults(self, tmp_path: Path):
        env = {"APP_CONFIG_FILE": str(tmp_path / "absent.yaml")}
        with patch.dict(os.environ, env, clear=True):
            config = load_default_config()

        assert config == ConfigData()

    def test_environment_variables(self):
        env = {"APP_ENVIRONMENT": "production", "APP_CONFIG_FILE": "/etc/registry.yaml"}
        with patch.dict(os.environ, env, clear=True):
            settings = EnvironmentVariables(_env_file=None)

        assert settings.environment == "production"
        assert settings.config_file == "/etc/registry.yaml"

    def test_database_backend_detection(self):
        assert DatabaseConfig(url="sqlite:///./users.db").is_sqlite
        assert not DatabaseConfig(url="postgresql://u@h:5432/d").is_sqlite


class TestContext:
    def test_default_context_available(self):
        context = get_context()

        assert isinstance(context, AppContext)
        assert context.config is get_config()

    def test_with_context_merges_partial_override(self):
        original = get_config()
        override = ConfigData(database=DatabaseConfig(url="sqlite://"))

        with with_context(override):
            config = get_config()
            assert config.database.url == "sqlite://"
            assert config.app == original.app
            assert config.logging == original.logging

        assert get_config() is original

    def test_nested_overrides(self):
        original = get_config()

        with with_context(ConfigData(app=AppConfig(port=8001))):
            with with_context(ConfigData(database=DatabaseConfig(url="sqlite://"))):
                config = get_config()
                assert config.app.port == 8001
                assert config.database.url == "sqlite://"
            assert get_config().database.url == original.database.url

    def test_with_context_none_is_noop(self):
        original = get_config()

        with with_context(None):
            assert get_config() is original

    def test_with_context_rejects_other_types(self):
        with pytest.raises(ValueError):
            with with_context({"app": {"port": 1}}):  # type: ignore[arg-type]
                pass

    def test_set_context_inside_override_is_undone(self):
        original = get_context()

        with with_context(ConfigData(app=AppConfig(port=8002))):
            set_context(AppContext(config=ConfigData(app=AppConfig(port=8003))))
            assert get_config().app.port == 8003

        assert get_context() is original
