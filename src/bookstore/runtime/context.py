from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path

from loguru import logger
from pydantic import BaseModel

from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.config.config_template import load_templated_yaml
from src.bookstore.runtime.settings import EnvironmentVariables


@dataclass
class AppContext:
    """Process-wide state visible to the current execution context."""

    config: ConfigData


def _load_default_config() -> ConfigData:
    env = EnvironmentVariables()
    config_path = Path(env.config_path)
    if config_path.exists():
        return load_templated_yaml(config_path)

    logger.warning("{} not found; using built-in defaults", config_path)
    config = ConfigData()
    config.database.uri = env.database_uri or ""
    return config


_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=AppContext(config=_load_default_config())
)


def get_context() -> AppContext:
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    return _app_context.set(context)


def _explicit_values(model: BaseModel) -> dict:
    """Nested dict of the fields explicitly set on ``model``.

    A nested model assigned as a whole is dumped in full.
    """
    values = {}
    for name in type(model).model_fields:
        value = getattr(model, name)
        if name in model.model_fields_set:
            values[name] = value.model_dump() if isinstance(value, BaseModel) else value
        elif isinstance(value, BaseModel):
            nested = _explicit_values(value)
            if nested:
                values[name] = nested
    return values


def _deep_merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _merge_configs(base_config: ConfigData, override_config: ConfigData) -> ConfigData:
    merged = _deep_merge(base_config.model_dump(), _explicit_values(override_config))
    return ConfigData.model_validate(merged)


@contextmanager
def with_context(config_override: ConfigData | None = None):
    """Temporarily apply a partial configuration override.

    Only the values explicitly set on ``config_override`` replace the current
    ones:

        override = ConfigData()
        override.books.duplicate_policy = "subset"
        with with_context(override):
            assert get_config().books.duplicate_policy == "subset"
    """
    if config_override is None:
        yield
        return

    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    current = get_context()
    token = set_context(
        replace(current, config=_merge_configs(current.config, config_override))
    )
    try:
        yield
    finally:
        _app_context.reset(token)


def set_config(config: ConfigData) -> None:
    """Replace the configuration of the current context."""
    set_context(replace(get_context(), config=config))


def get_config() -> ConfigData:
    return get_context().config
