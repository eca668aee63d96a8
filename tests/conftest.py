"""Shared pytest fixtures for c4render tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from c4render.core.caching.models import CacheOptions
from c4render.core.config.models import AppConfig, BrowserConfig, RendererConfig
from tests.fakes import FakeAgent, FakeAgentFactory, FakeParser

# ============================================================================
# Workspace Fixtures
# ============================================================================


@pytest.fixture
def sample_views() -> dict[str, str]:
    """Views of the sample workspace (key -> title)."""
    return {"context": "System Context", "containers": "Containers"}


@pytest.fixture
def workspace_file(tmp_path: Path) -> Path:
    """Create a workspace DSL file."""
    path = tmp_path / "workspace.dsl"
    path.write_text('workspace "Sample" {\n}\n', encoding="utf-8")
    return path


@pytest.fixture
def layout_file(tmp_path: Path) -> Path:
    """Create a workspace JSON with manual layout."""
    path = tmp_path / "workspace.json"
    path.write_text('{"name": "Sample", "views": {}}', encoding="utf-8")
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Output directory (not created)."""
    return tmp_path / "diagrams"


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def fake_agent(sample_views: dict[str, str]) -> FakeAgent:
    return FakeAgent(sample_views)


@pytest.fixture
def agent_factory(fake_agent: FakeAgent) -> FakeAgentFactory:
    return FakeAgentFactory(fake_agent)


@pytest.fixture
def fake_parser(sample_views: dict[str, str]) -> FakeParser:
    return FakeParser(sample_views)


@pytest.fixture
def app_config(output_dir: Path) -> AppConfig:
    """Config without browser installation and with the default renderer."""
    return AppConfig(
        output_dir=str(output_dir),
        renderer=RendererConfig(),
        browser=BrowserConfig(install_browser=False),
        cache=CacheOptions(),
    )
