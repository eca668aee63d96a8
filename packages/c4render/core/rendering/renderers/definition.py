"""Renderers that export a textual definition per view and render it with an engine."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol

from c4render.core.caching.tiered import TieredViewCache
from c4render.core.rendering.models import (
    DiagramDefinition,
    Rendered,
    RenderedArtifact,
    RendererKind,
    Skipped,
    View,
    ViewOutcome,
)
from c4render.core.workspace.models import WorkspaceSource
from c4render.core.workspace.protocols import DiagramExporter, WorkspaceParser

logger = logging.getLogger(__name__)


class DiagramEngine(Protocol):
    """Turns one diagram definition into SVG markup."""

    def prepare(self, definition: DiagramDefinition) -> DiagramDefinition:
        """Adjust the exported definition before it is written and rendered."""
        ...

    def render(self, definition: DiagramDefinition) -> str | None:
        """
        Render ``definition`` to SVG.

        Returns:
            SVG markup, or None when the engine reported a failure for this view

        Raises:
            EngineError: If the engine cannot run at all
        """
        ...


class DefinitionSession:
    """Session over pre-exported definitions; rendering runs off the event loop."""

    def __init__(self, definitions: dict[str, DiagramDefinition], engine: DiagramEngine) -> None:
        self.definitions = definitions
        self.engine = engine

    async def discover_views(self) -> list[View]:
        return [View(key=d.key, title=d.title) for d in self.definitions.values()]

    async def render_view(self, view: View) -> ViewOutcome:
        definition = self.definitions.get(view.key)
        if definition is None:
            return Skipped(view=view, reason="no diagram definition exported")

        logger.info(f"Rendering diagram {view.key}")
        svg = await asyncio.to_thread(self.engine.render, definition)
        if not svg:
            logger.warning(f"Rendering produced no SVG for view {view.key}, skipping.")
            return Skipped(view=view, reason="engine produced no SVG")

        return Rendered(
            view=view,
            artifact=RenderedArtifact(view_key=view.key, svg=svg, definition=definition),
        )


class DefinitionRenderer:
    """Renderer variant composed of a diagram exporter and a diagram engine."""

    def __init__(
        self,
        kind: RendererKind,
        renderer_id: str,
        parser: WorkspaceParser,
        exporter: DiagramExporter,
        engine: DiagramEngine,
        cache: TieredViewCache,
    ) -> None:
        self.kind = kind
        self._renderer_id = renderer_id
        self.parser = parser
        self.exporter = exporter
        self.engine = engine
        self.cache = cache

    @property
    def renderer_id(self) -> str:
        return self._renderer_id

    @property
    def render_all_on_miss(self) -> bool:
        return False

    @property
    def source_extension(self) -> str | None:
        return self.exporter.file_extension

    def export_definitions(self, source: WorkspaceSource) -> dict[str, DiagramDefinition]:
        workspace = self.parser.parse(source.workspace_path)
        return {
            key: self.engine.prepare(definition)
            for key, definition in self.exporter.export_diagrams(workspace).items()
        }

    @asynccontextmanager
    async def open(self, source: WorkspaceSource) -> AsyncIterator[DefinitionSession]:
        definitions = await asyncio.to_thread(self.export_definitions, source)
        yield DefinitionSession(definitions, self.engine)
