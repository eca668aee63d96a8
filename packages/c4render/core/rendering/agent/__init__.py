"""Rendering agent protocol and virtual origin.

The Playwright implementation lives in ``c4render.core.rendering.agent.browser``.
"""

from c4render.core.rendering.agent.origin import (
    ENTRY_RESOURCE,
    WORKDIR_ORIGIN,
    WORKSPACE_RESOURCE,
    OriginResponse,
    VirtualOrigin,
)
from c4render.core.rendering.agent.protocols import (
    DEFAULT_READY_SELECTOR,
    DEFAULT_VIEW_TIMEOUT_MS,
    AgentCommand,
    AgentResponse,
    RenderingAgent,
    RenderingAgentFactory,
)

__all__ = [
    "ENTRY_RESOURCE",
    "WORKDIR_ORIGIN",
    "WORKSPACE_RESOURCE",
    "OriginResponse",
    "VirtualOrigin",
    "DEFAULT_READY_SELECTOR",
    "DEFAULT_VIEW_TIMEOUT_MS",
    "AgentCommand",
    "AgentResponse",
    "RenderingAgent",
    "RenderingAgentFactory",
]
