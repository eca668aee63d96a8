"""Error types for workspace rendering.

Every fatal condition on the render path is raised as a ``RenderingError``
(or one of its subclasses) so callers can catch a single error kind.
Per-view soft failures are not errors; they surface as ``Skipped`` outcomes.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class RenderingErrorData(BaseModel):
    """Structured data for rendering errors.

    Args:
        message: Human-readable error description
        view_key: View being processed when the error occurred (if any)
        renderer: Renderer identity string (if known)
        cause: Original exception that caused this error
    """

    model_config = {"arbitrary_types_allowed": True}

    message: str
    view_key: str | None = None
    renderer: str | None = None
    cause: BaseException | None = Field(default=None, repr=False)


class RenderingError(Exception):
    """Base exception for all fatal rendering failures.

    Attributes:
        data: Structured error data (RenderingErrorData)
        message: Human-readable error description
        view_key: View being processed (if any)
        renderer: Renderer identity string (if known)
        cause: Original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        *,
        view_key: str | None = None,
        renderer: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.data = RenderingErrorData(
            message=message,
            view_key=view_key,
            renderer=renderer,
            cause=cause,
        )
        self.message = self.data.message
        self.view_key = self.data.view_key
        self.renderer = self.data.renderer
        self.cause = self.data.cause

        super().__init__(str(self))
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        """Format error for logging and display."""
        parts = [self.message]
        if self.renderer:
            parts.append(f"renderer={self.renderer}")
        if self.view_key:
            parts.append(f"view={self.view_key}")
        if self.cause is not None:
            parts.append(f"cause={type(self.cause).__name__}: {self.cause}")
        return " | ".join(parts)


class WorkspaceNotFoundError(RenderingError):
    """Workspace (or layout) source file does not exist."""


class NoViewsError(RenderingError):
    """The workspace defines no renderable views."""


class ViewNotFoundError(RenderingError):
    """The requested view key is not part of the workspace."""


class AgentError(RenderingError):
    """Rendering agent failed (navigation, discovery or evaluation)."""


class AgentTimeoutError(AgentError):
    """Rendering agent did not signal readiness within the timeout."""


class ArtifactWriteError(RenderingError):
    """Output directory, artifact or sentinel could not be written."""


class EngineError(RenderingError):
    """External diagram engine (PlantUML, Mermaid, Structurizr CLI) failed fatally."""
