"""Renderer variants."""

from c4render.core.rendering.renderers.base import DiagramRenderer, ViewSession
from c4render.core.rendering.renderers.definition import (
    DefinitionRenderer,
    DefinitionSession,
    DiagramEngine,
)
from c4render.core.rendering.renderers.factory import create_renderer
from c4render.core.rendering.renderers.mermaid import MermaidEngine
from c4render.core.rendering.renderers.plantuml import (
    PlantumlEngine,
    apply_layout_pragma,
    plantuml_renderer_id,
)
from c4render.core.rendering.renderers.structurizr import StructurizrRenderer

__all__ = [
    "DiagramRenderer",
    "ViewSession",
    "DefinitionRenderer",
    "DefinitionSession",
    "DiagramEngine",
    "create_renderer",
    "MermaidEngine",
    "PlantumlEngine",
    "apply_layout_pragma",
    "plantuml_renderer_id",
    "StructurizrRenderer",
]
