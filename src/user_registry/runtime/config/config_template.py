"""Load ``config.yaml`` with ``${VAR}`` placeholders resolved from the environment."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError

from src.user_registry.runtime.config.config_data import ConfigData

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def _resolve(expression: str) -> str:
    if ":-" in expression:
        name, default = expression.split(":-", 1)
        return os.getenv(name, default)

    if ":?" in expression:
        name, message = expression.split(":?", 1)
        value = os.getenv(name)
        if value is None:
            raise ValueError(f"Required environment variable {name}: {message}")
        return value

    value = os.getenv(expression)
    if value is None:
        raise ValueError(f"Required environment variable {expression} not set")
    return value


def substitute_env_vars(text: str) -> str:
    """Replace ``${VAR}``, ``${VAR:-default}`` and ``${VAR:?message}`` in ``text``.

    A required variable that is unset raises ``ValueError``.
    """
    return _PLACEHOLDER.sub(lambda match: _resolve(match.group(1)), text)


def apply_environment_overrides(env_mode: str) -> None:
    """Promote ``<ENV>_FOO`` variables to ``FOO`` for the active environment."""
    prefix = f"{env_mode.upper()}_"
    overrides = {name: value for name, value in os.environ.items() if name.startswith(prefix)}
    if overrides:
        logger.info("Applying environment-specific overrides: {}", sorted(overrides))
    for name, value in overrides.items():
        os.environ[name[len(prefix):]] = value


def parse_templated_yaml(content: str, env_mode: str = "development") -> ConfigData:
    """Resolve placeholders in ``content`` and validate the ``config`` section."""
    apply_environment_overrides(env_mode)
    substituted = substitute_env_vars(content)

    try:
        loaded = yaml.safe_load(substituted)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not loaded:
        raise ValueError("Failed to parse YAML: document is empty")

    try:
        return ConfigData(**(loaded.get("config") or {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def load_templated_yaml(file_path: Path, env_mode: str | None = None) -> ConfigData:
    env_mode = env_mode or os.getenv("APP_ENVIRONMENT", "development")
    logger.info("Loading configuration for environment: {}", env_mode)
    return parse_templated_yaml(Path(file_path).read_text(), env_mode)
