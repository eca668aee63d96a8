"""Configuration models for c4render."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field

from c4render.core.caching.models import CacheOptions
from c4render.core.rendering.models import PlantumlLayoutEngine, RendererKind


class ConfigBase(BaseModel):
    """Base class for c4render configurations.

    Provides common functionality for loading from files with defaults.
    Subclasses must implement default_path() to specify their default location.
    """

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path for this config type.

        Returns:
            Path to the default config file
        """
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Load config from path or use default path.

        Args:
            path: Path to config file, or None to use default

        Returns:
            Loaded config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValidationError: If config is invalid
        """
        if cls.__name__ == "AppConfig":
            from c4render.core.config.loader import load_app_config

            return load_app_config(path)  # type: ignore[return-value]

        from c4render.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
        raw = load_config(path)
        return cls.model_validate(raw)


class RendererConfig(BaseModel):
    """Renderer selection defaults."""

    default: RendererKind = Field(
        default=RendererKind.STRUCTURIZR, description="Renderer used when none is requested"
    )

    plantuml_layout_engine: PlantumlLayoutEngine = Field(
        default=PlantumlLayoutEngine.GRAPHVIZ,
        description="Layout engine for the C4-PlantUML renderer",
    )

    include_renderer_in_filename: bool = Field(
        default=False,
        description="Append the renderer identity to file names (several renderers, one output dir)",
    )


class BrowserConfig(BaseModel):
    """Headless browser settings for the Structurizr renderer."""

    ws_endpoint: str | None = Field(
        default=None,
        description="Remote Playwright endpoint; skips local browser install when set",
    )

    install_browser: bool = Field(
        default=True, description="Install Chromium once per renderer instance (local only)"
    )

    headless: bool = Field(default=True, description="Launch the local browser headless")

    viewport_width: int = Field(default=1920, gt=0)
    viewport_height: int = Field(default=1080, gt=0)

    view_timeout_ms: int = Field(
        default=30_000, gt=0, description="Wait for a diagram to become visible (fatal on timeout)"
    )

    connect_timeout_ms: int = Field(
        default=30_000, gt=0, description="Timeout when connecting to a remote browser"
    )

    assets_dir: str | None = Field(
        default=None,
        description=(
            "Directory with export.html, export.js and the Structurizr UI assets "
            "(defaults to the bundled page, which loads the UI from jsDelivr)"
        ),
    )


class EngineConfig(BaseModel):
    """External diagram engines used by the definition renderers."""

    plantuml_command: list[str] = Field(
        default_factory=lambda: ["plantuml"], description="PlantUML executable (and fixed args)"
    )

    mermaid_command: list[str] = Field(
        default_factory=lambda: ["mmdc"], description="Mermaid CLI executable"
    )

    structurizr_cli_command: list[str] = Field(
        default_factory=lambda: ["structurizr-cli"],
        description="Structurizr CLI used to parse DSL and export diagram definitions",
    )

    timeout_s: float = Field(default=120.0, gt=0, description="Per-process timeout in seconds")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON log lines")
    filename: str | None = Field(default=None, description="Log file (stdout if unset)")


class AppConfig(ConfigBase):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")
    output_dir: str = "diagrams"
    renderer: RendererConfig = RendererConfig()
    browser: BrowserConfig = BrowserConfig()
    engines: EngineConfig = EngineConfig()
    cache: CacheOptions = CacheOptions()
    logging: LoggingConfig = LoggingConfig()

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("c4render.yaml")
