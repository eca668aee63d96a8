"""Protocols for the external workspace collaborators."""

from pathlib import Path
from typing import Protocol

from c4render.core.rendering.models import DiagramDefinition
from c4render.core.workspace.models import WorkspaceModel


class WorkspaceParser(Protocol):
    """Parses a workspace source file into a WorkspaceModel."""

    def parse(self, path: Path) -> WorkspaceModel:
        """
        Parse the workspace at ``path``.

        Raises:
            WorkspaceNotFoundError: If the file does not exist
            EngineError: If parsing fails
        """
        ...


class DiagramExporter(Protocol):
    """Serializes every view of a workspace into a diagram definition."""

    @property
    def file_extension(self) -> str:
        """Extension of the definitions' source files (e.g. ``.puml``)."""
        ...

    def export_diagrams(self, workspace: WorkspaceModel) -> dict[str, DiagramDefinition]:
        """
        Export all views of ``workspace``.

        Returns:
            Definitions by view key
        """
        ...
