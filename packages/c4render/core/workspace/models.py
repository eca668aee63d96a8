"""Workspace models.

The workspace itself is opaque to the render core; only its views and its
JSON serialization are used.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from c4render.core.rendering.models import View

# View collections of the Structurizr JSON format, in UI order.
VIEW_COLLECTIONS = (
    "customViews",
    "systemLandscapeViews",
    "systemContextViews",
    "containerViews",
    "componentViews",
    "dynamicViews",
    "deploymentViews",
    "filteredViews",
    "imageViews",
)


@dataclass(frozen=True)
class WorkspaceSource:
    """Inputs identifying one workspace render.

    Attributes:
        workspace_path: Workspace source (DSL or JSON)
        layout_path: Optional layout JSON; used verbatim instead of the model
    """

    workspace_path: Path
    layout_path: Path | None = None


class WorkspaceModel(BaseModel):
    """Parsed workspace (Structurizr JSON representation)."""

    model_config = ConfigDict(frozen=True)

    source_path: Path = Field(description="File the workspace was parsed from")
    content: dict[str, Any] = Field(default_factory=dict, description="Workspace JSON document")

    def views(self) -> list[View]:
        """List all views with their titles (falling back to the key)."""
        views_section = self.content.get("views") or {}
        result: list[View] = []
        for collection in VIEW_COLLECTIONS:
            for entry in views_section.get(collection) or []:
                key = entry.get("key")
                if not key:
                    continue
                title = entry.get("title") or entry.get("name") or key
                result.append(View(key=str(key), title=str(title)))
        return result

    def to_json(self) -> str:
        """Serialize the workspace for the rendering agent."""
        return json.dumps(self.content, indent=2, ensure_ascii=False)
