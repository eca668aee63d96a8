"""Renderer factory for renderer variant dispatch."""

from __future__ import annotations

from pathlib import Path

from c4render.core.caching.backends.memory import MemoryCache
from c4render.core.caching.backends.null import NullCache
from c4render.core.caching.backends.sentinel import SentinelStore
from c4render.core.caching.protocols import FreshnessStore
from c4render.core.caching.tiered import TieredViewCache
from c4render.core.config.models import AppConfig
from c4render.core.rendering.agent.protocols import DEFAULT_READY_SELECTOR, RenderingAgentFactory
from c4render.core.rendering.models import PlantumlLayoutEngine, RendererKind
from c4render.core.rendering.renderers.mermaid import RENDERER_ID as MERMAID_RENDERER_ID
from c4render.core.rendering.renderers.mermaid import MermaidEngine
from c4render.core.rendering.renderers.base import DiagramRenderer
from c4render.core.rendering.renderers.definition import DefinitionRenderer
from c4render.core.rendering.renderers.plantuml import PlantumlEngine, plantuml_renderer_id
from c4render.core.rendering.renderers.structurizr import StructurizrRenderer
from c4render.core.workspace.protocols import DiagramExporter, WorkspaceParser
from c4render.core.workspace.structurizr_cli import CliDiagramExporter, ExportFormat, StructurizrCli


def create_renderer(
    kind: RendererKind,
    app_config: AppConfig,
    *,
    parser: WorkspaceParser | None = None,
    agent_factory: RenderingAgentFactory | None = None,
    exporter: DiagramExporter | None = None,
    freshness: FreshnessStore | None = None,
    layout_engine: PlantumlLayoutEngine | None = None,
) -> DiagramRenderer:
    """Create a renderer variant with its own memory tier.

    Collaborators not given are built from ``app_config`` (Structurizr CLI,
    Playwright agent, sentinel store).
    """
    memory = MemoryCache() if app_config.cache.enabled else NullCache()
    cache = TieredViewCache(memory, freshness or SentinelStore(), app_config.cache)
    engines = app_config.engines
    cli = StructurizrCli(engines.structurizr_cli_command, engines.timeout_s)
    parser = parser or cli

    if kind == RendererKind.STRUCTURIZR:
        if agent_factory is None:
            from c4render.core.rendering.agent.browser import PlaywrightAgentFactory

            agent_factory = PlaywrightAgentFactory(app_config.browser)
        browser = app_config.browser
        return StructurizrRenderer(
            agent_factory,
            parser,
            cache,
            assets_root=Path(browser.assets_dir) if browser.assets_dir else None,
            ready_selector=DEFAULT_READY_SELECTOR,
            view_timeout_ms=browser.view_timeout_ms,
        )

    if kind == RendererKind.PLANTUML_C4:
        engine = layout_engine or app_config.renderer.plantuml_layout_engine
        return DefinitionRenderer(
            kind=kind,
            renderer_id=plantuml_renderer_id(engine),
            parser=parser,
            exporter=exporter or CliDiagramExporter(cli, ExportFormat.C4PLANTUML),
            engine=PlantumlEngine(engine, engines.plantuml_command, engines.timeout_s),
            cache=cache,
        )

    if kind == RendererKind.MERMAID:
        return DefinitionRenderer(
            kind=kind,
            renderer_id=MERMAID_RENDERER_ID,
            parser=parser,
            exporter=exporter or CliDiagramExporter(cli, ExportFormat.MERMAID),
            engine=MermaidEngine(engines.mermaid_command, engines.timeout_s),
            cache=cache,
        )

    raise ValueError(f"Unknown renderer: {kind}")
