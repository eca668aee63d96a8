"""Workspace parsing and diagram export collaborators."""

from c4render.core.workspace.models import VIEW_COLLECTIONS, WorkspaceModel, WorkspaceSource
from c4render.core.workspace.protocols import DiagramExporter, WorkspaceParser
from c4render.core.workspace.structurizr_cli import (
    CliDiagramExporter,
    ExportFormat,
    StructurizrCli,
)

__all__ = [
    "VIEW_COLLECTIONS",
    "WorkspaceModel",
    "WorkspaceSource",
    "WorkspaceParser",
    "DiagramExporter",
    "StructurizrCli",
    "CliDiagramExporter",
    "ExportFormat",
]
