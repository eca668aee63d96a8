"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from c4render.core.config.models import AppConfig
from c4render.core.utils import logging as logging_utils

logger = logging.getLogger(__name__)

ENV_WS_ENDPOINT = "PLAYWRIGHT_WS_ENDPOINT"
ENV_LOG_LEVEL = "C4RENDER_LOG_LEVEL"

# Default app config path (can be overridden)
_DEFAULT_APP_CONFIG_PATH = Path("c4render.yaml")


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("c4render.json")
        'json'
        >>> detect_format("c4render.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Supports both JSON and YAML formats. Format is auto-detected
    from file extension.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            with path.open("r", encoding="utf-8") as f:
                content = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        # safe_load returns None for empty files
        if content is None:
            content = {}

    if not isinstance(content, dict):
        raise ValueError(f"Config file {path} must contain a mapping at top level")
    return content


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    A missing default config file is not an error; all defaults apply.
    Environment variables fill values the file leaves unset.

    Args:
        path: Path to app config file (.json, .yaml, or .yml)
              Defaults to c4render.yaml

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If an explicitly given config file does not exist
        ValidationError: If config is invalid
    """
    if path is None:
        path = _DEFAULT_APP_CONFIG_PATH
        if Path(path).exists():
            config = AppConfig.model_validate(load_config(path))
        else:
            config = AppConfig()
    else:
        config = AppConfig.model_validate(load_config(path))

    return _apply_env_overrides(config)


def configure_logging(config: AppConfig | None = None) -> None:
    """Configure Python logging from app config.

    Args:
        config: AppConfig instance (loads default if None)
    """
    if config is None:
        config = load_app_config()

    logging_utils.configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )


def _apply_env_overrides(config: AppConfig) -> AppConfig:
    """Fill unset config values from the environment.

    Args:
        config: AppConfig instance

    Returns:
        Updated copy of the config
    """
    if config.browser.ws_endpoint is None:
        endpoint = os.getenv(ENV_WS_ENDPOINT, "").strip()
        if endpoint:
            logger.debug(f"Loaded {ENV_WS_ENDPOINT} from environment")
            config = _with_section(config, "browser", ws_endpoint=endpoint)

    level = os.getenv(ENV_LOG_LEVEL, "").strip().upper()
    if level:
        try:
            config = _with_section(config, "logging", level=level)
        except ValidationError:
            logger.warning(f"Ignoring invalid {ENV_LOG_LEVEL}={level}")

    return config


def _with_section(config: AppConfig, section: str, **values: Any) -> AppConfig:
    """Validated copy of ``config`` with ``values`` set in ``section``."""
    data = config.model_dump()
    data[section] = {**data[section], **values}
    return AppConfig.model_validate(data)
