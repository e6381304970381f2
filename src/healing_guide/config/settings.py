"""Application settings.

Settings come from `<config_dir>/config.json` when present, then from
environment variables. The resulting `AppConfig` is built once at startup and
treated as read-only.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.exceptions import ConfigurationError
from .defaults import (
    CONFIG_FILE_NAME,
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TEMPERATURE,
    get_default_config_dir,
    get_default_database_path,
)


class RetryPolicy(BaseModel):
    """Bounded exponential backoff: `initial_delay * backoff_factor ** k` seconds."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(2, ge=0)
    initial_delay: float = Field(2.0, ge=0)
    backoff_factor: float = Field(2.0, ge=1)


CHAT_RETRY = RetryPolicy(max_retries=1, initial_delay=1.0, backoff_factor=2.0)
DOCUMENT_RETRY = RetryPolicy(max_retries=2, initial_delay=2.0, backoff_factor=2.0)
SEARCH_RETRY = RetryPolicy(max_retries=2, initial_delay=2.0, backoff_factor=2.0)


class AppConfig(BaseModel):
    """Runtime configuration for the resolution pipeline."""

    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = Field(DEFAULT_REQUEST_TIMEOUT, gt=0)
    temperature: float = DEFAULT_TEMPERATURE
    database_path: Path
    log_level: str = "INFO"
    log_file: Path | None = None
    coalesce_inflight: bool = True

    chat_retry: RetryPolicy = CHAT_RETRY
    document_retry: RetryPolicy = DOCUMENT_RETRY
    search_retry: RetryPolicy = SEARCH_RETRY


_TRUE_VALUES = ("true", "1", "yes", "on")


def _env_overrides() -> dict:
    overrides: dict = {}

    api_key = os.getenv("HEALING_GUIDE_API_KEY") or os.getenv("GEMINI_API_KEY")
    if api_key:
        overrides["api_key"] = api_key

    if model := os.getenv("HEALING_GUIDE_MODEL"):
        overrides["model"] = model
    if db_path := os.getenv("HEALING_GUIDE_DB"):
        overrides["database_path"] = Path(db_path)
    if log_level := os.getenv("HEALING_GUIDE_LOG_LEVEL"):
        overrides["log_level"] = log_level.upper()

    coalesce = os.getenv("HEALING_GUIDE_COALESCE")
    if coalesce is not None:
        overrides["coalesce_inflight"] = coalesce.lower() in _TRUE_VALUES

    return overrides


def _read_config_file(config_file: Path) -> dict:
    if not config_file.exists():
        return {}
    try:
        with open(config_file, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read {config_file}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_file} must contain a JSON object")
    return data


def load_config(config_dir: Path | None = None) -> AppConfig:
    """Build the configuration for `config_dir` (default `./.healing-guide`)."""
    config_dir = Path(config_dir) if config_dir else get_default_config_dir()
    config_file = config_dir / CONFIG_FILE_NAME

    values: dict = {"database_path": get_default_database_path(config_dir)}
    values.update(_read_config_file(config_file))
    values.update(_env_overrides())

    try:
        config = AppConfig.model_validate(values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    if not config.api_key:
        logger.debug("No provider API key configured; generation will fail with ProviderConfigError")
    return config
