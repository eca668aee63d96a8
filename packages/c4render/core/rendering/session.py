"""Rendering session driving one agent through the virtual origin.

State machine (per export call):

    UNMOUNTED -> MOUNTED -> NAVIGATED -> VIEWS_DISCOVERED -> RENDERING -> DONE

Failures before VIEWS_DISCOVERED, and agent timeouts/evaluation errors while
rendering, are fatal for the whole call. A view whose markup cannot be
exported is skipped and the loop continues.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TypeVar

from c4render.core.errors import AgentError, RenderingError
from c4render.core.rendering.agent.origin import VirtualOrigin
from c4render.core.rendering.agent.protocols import (
    DEFAULT_READY_SELECTOR,
    DEFAULT_VIEW_TIMEOUT_MS,
    AgentCommand,
    BecameVisible,
    ChangeView,
    DiscoverViews,
    ExportSvg,
    Navigate,
    Navigated,
    RenderingAgent,
    SvgExported,
    ViewChanged,
    ViewsDiscovered,
    WaitVisible,
)
from c4render.core.rendering.models import (
    Rendered,
    RenderedArtifact,
    Skipped,
    View,
    ViewOutcome,
)
from c4render.core.rendering.svg import normalize_svg_size

logger = logging.getLogger(__name__)

R = TypeVar("R")


class SessionState(str, Enum):
    """Lifecycle of a RenderSession."""

    UNMOUNTED = "unmounted"
    MOUNTED = "mounted"
    NAVIGATED = "navigated"
    VIEWS_DISCOVERED = "views_discovered"
    RENDERING = "rendering"
    DONE = "done"
    FAILED = "failed"


class RenderSession:
    """
    Drives one rendering agent across all views of a workspace.

    Not safe for concurrent use: the agent exposes one active view at a time,
    so views are rendered strictly one after another.

    Example:
        >>> async with agent_factory.open() as agent:
        ...     session = RenderSession(agent, VirtualOrigin(workspace_json, assets_root))
        ...     views = await session.discover_views()
        ...     outcomes = [await session.render_view(view) for view in views]
        ...     session.finish()
    """

    def __init__(
        self,
        agent: RenderingAgent,
        origin: VirtualOrigin,
        *,
        ready_selector: str = DEFAULT_READY_SELECTOR,
        view_timeout_ms: int = DEFAULT_VIEW_TIMEOUT_MS,
        normalize_svg: bool = True,
    ) -> None:
        self.agent = agent
        self.origin = origin
        self.ready_selector = ready_selector
        self.view_timeout_ms = view_timeout_ms
        self.normalize_svg = normalize_svg
        self._state = SessionState.UNMOUNTED
        self._views: dict[str, View] | None = None

    @property
    def state(self) -> SessionState:
        """Current lifecycle state."""
        return self._state

    @property
    def views(self) -> dict[str, View]:
        """Discovered views by key (empty before discovery)."""
        return dict(self._views or {})

    async def start(self) -> None:
        """Mount the virtual origin and navigate to its entry resource."""
        self._require(SessionState.UNMOUNTED)
        try:
            await self.agent.mount(self.origin)
            self._state = SessionState.MOUNTED

            logger.debug(f"Opening: {self.origin.entry_url}")
            await self._execute(Navigate(url=self.origin.entry_url), Navigated)
            self._state = SessionState.NAVIGATED
        except RenderingError:
            self._state = SessionState.FAILED
            raise
        except Exception as e:
            self._state = SessionState.FAILED
            raise AgentError("Failed to load the rendering page", cause=e) from e

    async def discover_views(self) -> list[View]:
        """
        Query all views of the loaded workspace (starts the session if needed).

        Returns:
            Views in workspace order (may be empty; callers decide if that is fatal)

        Raises:
            AgentError: If the query fails
        """
        if self._state == SessionState.UNMOUNTED:
            await self.start()
        if self._views is not None:
            return list(self._views.values())

        self._require(SessionState.NAVIGATED)
        try:
            response = await self._execute(DiscoverViews(), ViewsDiscovered)
        except RenderingError:
            self._state = SessionState.FAILED
            raise

        self._views = {key: View(key=key, title=title) for key, title in response.views.items()}
        self._state = SessionState.VIEWS_DISCOVERED
        return list(self._views.values())

    async def render_view(self, view: View) -> ViewOutcome:
        """
        Switch to ``view``, wait for its diagram and export the SVG.

        Returns:
            Rendered outcome, or Skipped if the agent returned no markup

        Raises:
            AgentTimeoutError: If the diagram did not become visible in time
            AgentError: If switching or exporting failed
        """
        self._require(SessionState.VIEWS_DISCOVERED, SessionState.RENDERING)
        self._state = SessionState.RENDERING

        try:
            await self._execute(ChangeView(view_key=view.key), ViewChanged)
            await self._execute(
                WaitVisible(selector=self.ready_selector, timeout_ms=self.view_timeout_ms),
                BecameVisible,
            )
            exported = await self._execute(ExportSvg(), SvgExported)
        except RenderingError:
            self._state = SessionState.FAILED
            raise

        if exported.svg is None:
            logger.warning(f"SVG not retrieved for view {view.key}, skipping.")
            return Skipped(view=view, reason="agent returned no SVG markup")

        svg = normalize_svg_size(exported.svg) if self.normalize_svg else exported.svg
        return Rendered(view=view, artifact=RenderedArtifact(view_key=view.key, svg=svg))

    def finish(self) -> None:
        """Mark the session done (after the last view was rendered)."""
        if self._state != SessionState.FAILED:
            self._state = SessionState.DONE

    async def _execute(self, command: AgentCommand, expected: type[R]) -> R:
        response = await self.agent.execute(command)
        if not isinstance(response, expected):
            raise AgentError(
                f"Unexpected response {type(response).__name__} to {type(command).__name__}"
            )
        return response

    def _require(self, *allowed: SessionState) -> None:
        if self._state not in allowed:
            expected = ", ".join(s.value for s in allowed)
            raise RenderingError(
                f"Invalid session state {self._state.value} (expected {expected})"
            )
