"""Configuration management for c4render."""

from c4render.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
)
from c4render.core.config.models import (
    AppConfig,
    BrowserConfig,
    ConfigBase,
    EngineConfig,
    LoggingConfig,
    RendererConfig,
)

__all__ = [
    # Loaders
    "load_config",
    "load_app_config",
    "detect_format",
    "configure_logging",
    # Models
    "AppConfig",
    "ConfigBase",
    "BrowserConfig",
    "EngineConfig",
    "LoggingConfig",
    "RendererConfig",
]
