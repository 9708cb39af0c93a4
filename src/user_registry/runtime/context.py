from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path

from loguru import logger
from pydantic import BaseModel

from src.user_registry.runtime.config.config_data import ConfigData
from src.user_registry.runtime.config.config_template import load_templated_yaml
from src.user_registry.runtime.config.settings import EnvironmentVariables


@dataclass
class AppContext:
    """Application context containing configuration and other app-wide state."""

    config: ConfigData


def load_default_config() -> ConfigData:
    """Load the configuration file named by ``APP_CONFIG_FILE``.

    A missing file is not fatal: the service starts on built-in defaults.
    """
    env = EnvironmentVariables()
    path = Path(env.config_file)
    if not path.exists():
        logger.warning("Configuration file {} not found; using defaults", path)
        return ConfigData()
    return load_templated_yaml(path, env.environment)


# Global configuration instance
_default_context = AppContext(config=load_default_config())


_app_context: ContextVar[AppContext] = ContextVar("app_context", default=_default_context)


def get_context() -> AppContext:
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    return _app_context.set(context)


def _dump_set_fields(model: BaseModel) -> dict:
    """Dump only the fields set explicitly, recursing into nested models."""
    result = {}
    for field_name in model.__class__.model_fields:
        value = getattr(model, field_name)
        if isinstance(value, BaseModel):
            nested = _dump_set_fields(value)
            if nested:
                result[field_name] = nested
            elif field_name in model.model_fields_set:
                result[field_name] = value.model_dump()
        elif field_name in model.model_fields_set:
            result[field_name] = value
    return result


def _deep_merge(base: dict, override: dict) -> dict:
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


@contextmanager
def with_context(config_override: ConfigData | None = None):
    """Temporarily override the current configuration.

    The override is merged over the current configuration, so a partial
    override such as ``ConfigData(database=DatabaseConfig(url="sqlite://"))``
    keeps every other setting.
    """
    if config_override is None:
        yield
        return
    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    current = get_context()
    merged = ConfigData.model_validate(
        _deep_merge(current.config.model_dump(), _dump_set_fields(config_override))
    )
    token = set_context(replace(current, config=merged))
    try:
        yield
    finally:
        _app_context.reset(token)


def get_config() -> ConfigData:
    return get_context().config
