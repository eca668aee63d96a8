"""Structurizr renderer: the Structurizr UI in a headless browser."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from c4render.core.caching.tiered import TieredViewCache
from c4render.core.errors import WorkspaceNotFoundError
from c4render.core.rendering.agent.origin import VirtualOrigin
from c4render.core.rendering.agent.protocols import (
    DEFAULT_READY_SELECTOR,
    DEFAULT_VIEW_TIMEOUT_MS,
    RenderingAgentFactory,
)
from c4render.core.rendering.models import RendererKind
from c4render.core.rendering.session import RenderSession
from c4render.core.workspace.models import WorkspaceSource
from c4render.core.workspace.protocols import WorkspaceParser
from c4render.resources import STRUCTURIZR_ASSETS

logger = logging.getLogger(__name__)

RENDERER_ID = "Structurizr"


class StructurizrRenderer:
    """
    Renders views through the Structurizr UI driven by a rendering agent.

    A session renders every view of the workspace once opened, so a single
    miss refreshes the whole output directory.
    """

    kind = RendererKind.STRUCTURIZR

    def __init__(
        self,
        agent_factory: RenderingAgentFactory,
        parser: WorkspaceParser,
        cache: TieredViewCache,
        *,
        assets_root: Path | None = None,
        ready_selector: str = DEFAULT_READY_SELECTOR,
        view_timeout_ms: int = DEFAULT_VIEW_TIMEOUT_MS,
    ) -> None:
        self.agent_factory = agent_factory
        self.parser = parser
        self.cache = cache
        self.assets_root = assets_root or STRUCTURIZR_ASSETS
        self.ready_selector = ready_selector
        self.view_timeout_ms = view_timeout_ms

    @property
    def renderer_id(self) -> str:
        return RENDERER_ID

    @property
    def render_all_on_miss(self) -> bool:
        return True

    @property
    def source_extension(self) -> str | None:
        return None

    def workspace_json(self, source: WorkspaceSource) -> str:
        """
        JSON document served as ``workspace.json``.

        The layout file is used verbatim when given (it carries the manual
        element positions); otherwise the parsed model is serialized.
        """
        if source.layout_path is not None:
            try:
                return source.layout_path.read_text(encoding="utf-8")
            except OSError as e:
                raise WorkspaceNotFoundError(
                    f"Workspace JSON not readable: {source.layout_path}", cause=e
                ) from e
            except UnicodeDecodeError as e:
                raise WorkspaceNotFoundError(
                    f"Workspace JSON is not valid UTF-8: {source.layout_path}", cause=e
                ) from e
        return self.parser.parse(source.workspace_path).to_json()

    @asynccontextmanager
    async def open(self, source: WorkspaceSource) -> AsyncIterator[RenderSession]:
        workspace_json = await asyncio.to_thread(self.workspace_json, source)
        origin = VirtualOrigin(workspace_json, self.assets_root)

        async with self.agent_factory.open() as agent:
            session = RenderSession(
                agent,
                origin,
                ready_selector=self.ready_selector,
                view_timeout_ms=self.view_timeout_ms,
            )
            yield session
            session.finish()
