"""Data models for views, diagram definitions and render outcomes."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RendererKind(str, Enum):
    """Supported renderer variants."""

    STRUCTURIZR = "structurizr"
    PLANTUML_C4 = "plantuml_c4"
    MERMAID = "mermaid"


class PlantumlLayoutEngine(str, Enum):
    """Layout engine used by PlantUML (written as ``!pragma layout <value>``)."""

    ELK = "elk"
    GRAPHVIZ = "graphviz"
    SMETANA = "smetana"


class View(BaseModel):
    """A named, independently renderable diagram of a workspace."""

    model_config = ConfigDict(frozen=True)

    key: str
    title: str = ""


class DiagramDefinition(BaseModel):
    """Renderer-specific source text for one view (PlantUML, Mermaid, ...)."""

    model_config = ConfigDict(frozen=True)

    key: str
    title: str = ""
    definition: str
    file_extension: str = Field(description="Source file extension, including the dot")


class RenderedArtifact(BaseModel):
    """Rendered SVG for one view, plus the definition it was produced from (if any)."""

    model_config = ConfigDict(frozen=True)

    view_key: str
    svg: str
    definition: DiagramDefinition | None = None


class Rendered(BaseModel):
    """Outcome: the view was rendered."""

    model_config = ConfigDict(frozen=True)

    status: Literal["rendered"] = "rendered"
    view: View
    artifact: RenderedArtifact


class Skipped(BaseModel):
    """Outcome: the view produced no output; other views are unaffected."""

    model_config = ConfigDict(frozen=True)

    status: Literal["skipped"] = "skipped"
    view: View
    reason: str


ViewOutcome = Rendered | Skipped


class ExportedView(BaseModel):
    """A view written to disk by an export call."""

    model_config = ConfigDict(frozen=True)

    view_key: str
    svg_path: Path
    source_path: Path | None = None
    hash: str
    from_cache: bool = False
