"""Load ``config.yaml`` with environment variable placeholders."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError

from src.bookstore.runtime.config.config_data import ConfigData

PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")

REQUIRED_ENV_VARS = {
    "DATABASE_URI": "MongoDB connection URI shared by every service",
}


def _resolve(expression: str) -> str:
    if ":-" in expression:
        name, default = expression.split(":-", 1)
        return os.getenv(name, default)

    name, _, message = expression.partition(":?")
    value = os.getenv(name)
    if value is None:
        if message:
            raise ValueError(f"Required environment variable {name}: {message}")
        raise ValueError(f"Required environment variable {name} not set")
    return value


def substitute_env_vars(text: str) -> str:
    """Replace every placeholder in ``text`` with its environment value.

    ``${NAME}`` and ``${NAME:?message}`` raise ValueError when NAME is unset;
    ``${NAME:-default}`` falls back to ``default``.
    """
    return PLACEHOLDER.sub(lambda match: _resolve(match.group(1)), text)


def apply_environment_overrides(env_mode: str) -> list[str]:
    """Copy ``<ENV>_NAME`` variables to ``NAME`` for the active environment.

    Returns the names of the variables that were set.
    """
    prefix = f"{env_mode.upper()}_"
    applied = []
    for name, value in list(os.environ.items()):
        if not name.startswith(prefix):
            continue
        target = name.removeprefix(prefix)
        os.environ[target] = value
        applied.append(target)
        logger.debug("Set environment variable {} from {}", target, name)
    return applied


def load_templated_yaml(file_path: Path) -> ConfigData:
    """Read ``file_path`` and validate its ``config`` section.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if a required variable is unset, the YAML is malformed or
            the values do not validate.
    """
    raw = Path(file_path).read_text(encoding="utf-8")

    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    applied = apply_environment_overrides(env_mode)
    logger.info(
        "Loading configuration {} for environment {} (overrides: {})",
        file_path,
        env_mode,
        applied or "none",
    )

    try:
        loaded = yaml.safe_load(substitute_env_vars(raw))
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not loaded:
        raise ValueError(f"{file_path} is empty")

    try:
        return ConfigData.model_validate(loaded.get("config", {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def validate_config_env_vars() -> dict[str, str]:
    """Required environment variables that are unset or empty, with descriptions."""
    return {
        name: description
        for name, description in REQUIRED_ENV_VARS.items()
        if not os.getenv(name)
    }
