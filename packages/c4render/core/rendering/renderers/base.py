"""Renderer capability shared by every variant."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from c4render.core.caching.tiered import TieredViewCache
from c4render.core.rendering.models import RendererKind, View, ViewOutcome
from c4render.core.workspace.models import WorkspaceSource


class ViewSession(Protocol):
    """One open rendering session over a workspace."""

    async def discover_views(self) -> list[View]:
        """List the views this session can render, in workspace order."""
        ...

    async def render_view(self, view: View) -> ViewOutcome:
        """Render one view; soft failures come back as Skipped."""
        ...


class DiagramRenderer(Protocol):
    """
    A renderer variant.

    Variants differ in how views are produced; caching, file naming and
    persistence are handled by the exporter around them.
    """

    kind: RendererKind
    cache: TieredViewCache

    @property
    def renderer_id(self) -> str:
        """Identity mixed into every cache hash (e.g. ``C4-PlantUML(elk)``)."""
        ...

    @property
    def render_all_on_miss(self) -> bool:
        """Whether a miss for one view renders every view of the session."""
        ...

    @property
    def source_extension(self) -> str | None:
        """Extension of the source definition files written next to SVGs, if any."""
        ...

    def open(self, source: WorkspaceSource) -> AbstractAsyncContextManager[ViewSession]:
        """Open a session for ``source``."""
        ...
