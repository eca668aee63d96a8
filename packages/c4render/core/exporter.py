"""Workspace renderer - top-level export orchestration.

Resolves cache hits per requested view, opens a renderer session only on a
miss, writes artifacts and populates both cache tiers:

    hash -> memory -> sentinel -> [miss] session -> normalize -> write -> cache

Renderer variants are created lazily and kept for the lifetime of the
WorkspaceRenderer, so their memory tiers (and the one-time browser install)
carry across export calls.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from c4render.core.caching.backends.sentinel import SentinelStore
from c4render.core.caching.fingerprint import build_view_hash
from c4render.core.caching.protocols import FreshnessStore
from c4render.core.config.models import AppConfig
from c4render.core.errors import (
    ArtifactWriteError,
    NoViewsError,
    ViewNotFoundError,
    WorkspaceNotFoundError,
)
from c4render.core.io import FileSystem, RealFileSystem
from c4render.core.rendering.agent.protocols import RenderingAgentFactory
from c4render.core.rendering.models import (
    ExportedView,
    PlantumlLayoutEngine,
    RenderedArtifact,
    RendererKind,
    Skipped,
    View,
)
from c4render.core.rendering.renderers.base import DiagramRenderer
from c4render.core.rendering.renderers.factory import create_renderer
from c4render.core.utils.formatting import safe_file_stem
from c4render.core.utils.logging import log_performance, view_logger
from c4render.core.workspace.models import WorkspaceSource
from c4render.core.workspace.protocols import DiagramExporter, WorkspaceParser

logger = logging.getLogger(__name__)


class WorkspaceRenderer:
    """Caller-owned handle for rendering workspaces to SVG.

    Not safe for concurrent export calls; views are rendered one after another.

    Example:
        >>> renderer = WorkspaceRenderer()
        >>> paths = await renderer.render(Path("workspace.dsl"), view_key="context")
        >>> paths["context"]
        PosixPath('diagrams/context.svg')
    """

    def __init__(
        self,
        app_config: AppConfig | Path | str | None = None,
        *,
        parser: WorkspaceParser | None = None,
        agent_factory: RenderingAgentFactory | None = None,
        exporters: dict[RendererKind, DiagramExporter] | None = None,
        freshness: FreshnessStore | None = None,
        fs: FileSystem | None = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            app_config: AppConfig instance, path, or None (uses default path)
            parser: Workspace parser (defaults to the Structurizr CLI)
            agent_factory: Rendering agent factory (defaults to Playwright)
            exporters: Diagram exporters per definition variant
            freshness: Sentinel store shared by every variant
            fs: Async filesystem for artifacts and markers (defaults to RealFileSystem)

        Raises:
            FileNotFoundError: If an explicit config path doesn't exist
            ValidationError: If the config is invalid
        """
        self.app_config = self._resolve_config(app_config)
        self.parser = parser
        self.agent_factory = agent_factory
        self.exporters = dict(exporters or {})
        self.fs = fs or RealFileSystem()
        self.freshness = freshness or SentinelStore(self.fs)
        self._renderers: dict[str, DiagramRenderer] = {}

    @staticmethod
    def _resolve_config(value: Any) -> AppConfig:
        if value is None:
            return AppConfig.load_or_default()
        elif isinstance(value, (Path, str)):
            return AppConfig.load_or_default(Path(value))
        elif isinstance(value, AppConfig):
            return value
        else:
            raise TypeError(f"Expected AppConfig, Path, str, or None; got {type(value).__name__}")

    def resolve_renderer(
        self,
        renderer: RendererKind | None = None,
        layout_engine: PlantumlLayoutEngine | None = None,
    ) -> DiagramRenderer:
        """Return the renderer variant for ``renderer``, creating it on first use."""
        if renderer is None:
            renderer = self.app_config.renderer.default
            logger.info(f"No renderer specified, falling back to {renderer.value}")

        if renderer != RendererKind.PLANTUML_C4:
            layout_engine = None
        elif layout_engine is None:
            layout_engine = self.app_config.renderer.plantuml_layout_engine
            logger.info(f"No PlantUML layout engine specified, falling back to {layout_engine.value}")

        cache_id = f"{renderer.value}:{layout_engine.value if layout_engine else ''}"
        variant = self._renderers.get(cache_id)
        if variant is None:
            variant = create_renderer(
                renderer,
                self.app_config,
                parser=self.parser,
                agent_factory=self.agent_factory,
                exporter=self.exporters.get(renderer),
                freshness=self.freshness,
                layout_engine=layout_engine,
            )
            self._renderers[cache_id] = variant
        return variant

    async def render(
        self,
        workspace_path: Path | str,
        layout_path: Path | str | None = None,
        output_dir: Path | str | None = None,
        view_key: str | None = None,
        renderer: RendererKind | None = None,
        layout_engine: PlantumlLayoutEngine | None = None,
    ) -> dict[str, Path]:
        """Render a workspace and return SVG paths by view key.

        With ``view_key`` only that view is returned (other views may still be
        rendered and cached). Without it every view is rendered.

        Raises:
            RenderingError: On any fatal condition; nothing is written in that case
        """
        exported = await self.render_detailed(
            workspace_path,
            layout_path=layout_path,
            output_dir=output_dir,
            view_key=view_key,
            renderer=renderer,
            layout_engine=layout_engine,
        )
        return {view.view_key: view.svg_path for view in exported}

    def render_sync(self, *args: Any, **kwargs: Any) -> dict[str, Path]:
        """Synchronous wrapper for :meth:`render`."""
        return asyncio.run(self.render(*args, **kwargs))

    @log_performance
    async def render_detailed(
        self,
        workspace_path: Path | str,
        layout_path: Path | str | None = None,
        output_dir: Path | str | None = None,
        view_key: str | None = None,
        renderer: RendererKind | None = None,
        layout_engine: PlantumlLayoutEngine | None = None,
    ) -> list[ExportedView]:
        """Like :meth:`render`, returning hashes and cache provenance as well."""
        source = WorkspaceSource(
            workspace_path=Path(workspace_path),
            layout_path=Path(layout_path) if layout_path is not None else None,
        )
        if not source.workspace_path.is_file():
            raise WorkspaceNotFoundError(f"Workspace file not found: {source.workspace_path}")
        if source.layout_path is not None and not source.layout_path.is_file():
            raise WorkspaceNotFoundError(f"Workspace JSON not found: {source.layout_path}")

        out = Path(output_dir) if output_dir is not None else Path(self.app_config.output_dir)
        variant = self.resolve_renderer(renderer, layout_engine)

        if view_key is not None:
            cached = await self._from_cache(variant, source, out, View(key=view_key))
            if cached is not None:
                view_logger(logger, variant.renderer_id, view_key).info("Up to date")
                return [cached]

        await self._ensure_directory(out)
        exported = await self._render_session(variant, source, out, view_key)

        if view_key is None:
            return exported
        requested = [view for view in exported if view.view_key == view_key]
        if not requested:
            view_logger(logger, variant.renderer_id, view_key).warning(
                "Produced no SVG; nothing to return"
            )
        return requested

    async def _from_cache(
        self,
        variant: DiagramRenderer,
        source: WorkspaceSource,
        output_dir: Path,
        view: View,
    ) -> ExportedView | None:
        digest = self._hash(variant, source, view.key)
        svg_path = self._svg_path(variant, output_dir, view.key)

        hit = await variant.cache.lookup(view.key, digest, svg_path)
        if hit is None:
            return None

        if hit.artifact is None:
            return ExportedView(view_key=view.key, svg_path=svg_path, hash=digest, from_cache=True)

        # Memory hit: the artifact may be gone from disk; write it back.
        await self._ensure_directory(output_dir)
        exported = await self._persist(variant, output_dir, hit.artifact, digest)
        return exported.model_copy(update={"from_cache": True})

    async def _render_session(
        self,
        variant: DiagramRenderer,
        source: WorkspaceSource,
        output_dir: Path,
        view_key: str | None,
    ) -> list[ExportedView]:
        rendered: list[RenderedArtifact] = []

        async with variant.open(source) as session:
            views = await session.discover_views()
            if not views:
                raise NoViewsError(
                    f"No views found in workspace {source.workspace_path}",
                    renderer=variant.renderer_id,
                )

            by_key = {view.key: view for view in views}
            if view_key is not None and view_key not in by_key:
                raise ViewNotFoundError(
                    f"View not found: {view_key} (available: {', '.join(by_key)})",
                    view_key=view_key,
                    renderer=variant.renderer_id,
                )

            targets = views if view_key is None or variant.render_all_on_miss else [by_key[view_key]]
            view_logger(logger, variant.renderer_id).info(f"Rendering {len(targets)} view(s)")

            for view in targets:
                outcome = await session.render_view(view)
                if isinstance(outcome, Skipped):
                    view_logger(logger, variant.renderer_id, view.key).warning(
                        f"Skipped: {outcome.reason}"
                    )
                    continue
                rendered.append(outcome.artifact)

        # Written only once the whole session succeeded.
        exported = []
        for artifact in rendered:
            digest = self._hash(variant, source, artifact.view_key)
            exported.append(await self._persist(variant, output_dir, artifact, digest))

        logger.info(f"Export completed. SVG files in: {output_dir.absolute()}")
        return exported

    async def _persist(
        self,
        variant: DiagramRenderer,
        output_dir: Path,
        artifact: RenderedArtifact,
        digest: str,
    ) -> ExportedView:
        stem = self._file_stem(variant, artifact.view_key)
        svg_path = output_dir / f"{stem}.svg"
        source_path = None

        try:
            if artifact.definition is not None:
                source_path = output_dir / f"{stem}{artifact.definition.file_extension}"
                await self.fs.write_text(source_path, artifact.definition.definition)
            await self.fs.write_text(svg_path, artifact.svg)
        except OSError as e:
            raise ArtifactWriteError(
                f"Failed to write {svg_path}",
                view_key=artifact.view_key,
                renderer=variant.renderer_id,
                cause=e,
            ) from e

        await variant.cache.store(artifact.view_key, digest, svg_path, artifact)
        view_logger(logger, variant.renderer_id, artifact.view_key).debug(f"Wrote {svg_path}")
        return ExportedView(
            view_key=artifact.view_key, svg_path=svg_path, source_path=source_path, hash=digest
        )

    def _hash(self, variant: DiagramRenderer, source: WorkspaceSource, view_key: str) -> str:
        return build_view_hash(
            source.workspace_path, source.layout_path, view_key, variant.renderer_id
        )

    def _file_stem(self, variant: DiagramRenderer, view_key: str) -> str:
        if self.app_config.renderer.include_renderer_in_filename:
            return safe_file_stem(view_key, variant.renderer_id)
        return safe_file_stem(view_key)

    def _svg_path(self, variant: DiagramRenderer, output_dir: Path, view_key: str) -> Path:
        return output_dir / f"{self._file_stem(variant, view_key)}.svg"

    async def _ensure_directory(self, path: Path) -> None:
        try:
            await self.fs.mkdirs(path, exist_ok=True)
        except OSError as e:
            raise ArtifactWriteError(f"Failed to create output directory {path}", cause=e) from e
