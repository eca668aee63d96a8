"""Command/response protocol for the rendering agent.

The agent is a stateful, browser-like automation target. It is driven by a
small closed set of commands, each answered by a typed response, so the
orchestration logic never depends on a specific automation transport.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from typing import Protocol

from c4render.core.rendering.agent.origin import VirtualOrigin

DEFAULT_READY_SELECTOR = "#diagram svg"
DEFAULT_VIEW_TIMEOUT_MS = 30_000


# Commands


@dataclass(frozen=True)
class Navigate:
    """Load ``url`` in the agent."""

    url: str


@dataclass(frozen=True)
class DiscoverViews:
    """Ask the loaded workspace for all view keys and titles."""


@dataclass(frozen=True)
class ChangeView:
    """Switch the active view."""

    view_key: str


@dataclass(frozen=True)
class WaitVisible:
    """Block until ``selector`` is visible, at most ``timeout_ms``."""

    selector: str = DEFAULT_READY_SELECTOR
    timeout_ms: int = DEFAULT_VIEW_TIMEOUT_MS


@dataclass(frozen=True)
class ExportSvg:
    """Serialize the active view to SVG markup."""


AgentCommand = Navigate | DiscoverViews | ChangeView | WaitVisible | ExportSvg


# Responses


@dataclass(frozen=True)
class Navigated:
    """Navigation finished."""

    url: str
    status: int | None = None


@dataclass(frozen=True)
class ViewsDiscovered:
    """View keys mapped to titles, in workspace order."""

    views: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ViewChanged:
    """The active view was switched."""

    view_key: str


@dataclass(frozen=True)
class BecameVisible:
    """The awaited element is visible."""

    selector: str


@dataclass(frozen=True)
class SvgExported:
    """SVG markup of the active view; ``None`` when the agent could not export it."""

    svg: str | None


AgentResponse = Navigated | ViewsDiscovered | ViewChanged | BecameVisible | SvgExported


class RenderingAgent(Protocol):
    """Protocol for an opened rendering agent (one page, one active view).

    Implementations must:
    - Route requests for the virtual origin through ``origin.resolve`` once
      ``mount`` has returned, and pass other origins through untouched
    - Raise ``AgentTimeoutError`` when a ``WaitVisible`` expires
    - Raise ``AgentError`` for any other automation failure

    Not safe for concurrent use.
    """

    async def mount(self, origin: VirtualOrigin) -> None:
        """
        Install request interception for ``origin``.

        Must be fully installed before the first ``Navigate``.
        """
        ...

    async def execute(self, command: AgentCommand) -> AgentResponse:
        """
        Execute one command.

        Args:
            command: One of the agent commands

        Returns:
            The response type matching the command

        Raises:
            AgentTimeoutError: If a wait expired
            AgentError: On any other automation failure
        """
        ...


class RenderingAgentFactory(Protocol):
    """Creates agent sessions; owns one-time setup such as browser installation."""

    def open(self) -> AbstractAsyncContextManager[RenderingAgent]:
        """Open a new agent session (closed when the context exits)."""
        ...
