"""Rendering: agent sessions, renderer variants and SVG post-processing.

Only models and SVG helpers are re-exported here; import sessions and
renderers from their modules.
"""

from c4render.core.rendering.models import (
    DiagramDefinition,
    ExportedView,
    PlantumlLayoutEngine,
    Rendered,
    RenderedArtifact,
    RendererKind,
    Skipped,
    View,
    ViewOutcome,
)
from c4render.core.rendering.svg import normalize_svg_size

__all__ = [
    "DiagramDefinition",
    "ExportedView",
    "PlantumlLayoutEngine",
    "Rendered",
    "RenderedArtifact",
    "RendererKind",
    "Skipped",
    "View",
    "ViewOutcome",
    "normalize_svg_size",
]
