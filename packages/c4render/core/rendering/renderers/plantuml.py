"""C4-PlantUML renderer: PlantUML definitions rendered by the ``plantuml`` executable."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from c4render.core.rendering.models import DiagramDefinition, PlantumlLayoutEngine
from c4render.core.utils.process import run_process

logger = logging.getLogger(__name__)

_PRAGMA_PREFIX = "!pragma layout "
_HEADER = "@startuml"


def plantuml_renderer_id(layout_engine: PlantumlLayoutEngine) -> str:
    """Renderer identity, e.g. ``C4-PlantUML(graphviz)``."""
    return f"C4-PlantUML({layout_engine.value})"


def apply_layout_pragma(definition: str, layout_engine: PlantumlLayoutEngine) -> str:
    """
    Insert ``!pragma layout <engine>`` directly after the ``@startuml`` header.

    An existing layout pragma is replaced, so applying twice is a no-op.
    Definitions without a header get the pragma as their first line.
    """
    pragma = f"{_PRAGMA_PREFIX}{layout_engine.value}"
    lines = [
        line
        for line in definition.replace("\r\n", "\n").split("\n")
        if not line.strip().startswith(_PRAGMA_PREFIX)
    ]

    for index, line in enumerate(lines):
        if line.strip().startswith(_HEADER):
            lines.insert(index + 1, pragma)
            break
    else:
        lines.insert(0, pragma)

    return "\n".join(lines)


class PlantumlEngine:
    """Renders PlantUML definitions with ``plantuml -tsvg -pipe``."""

    def __init__(
        self,
        layout_engine: PlantumlLayoutEngine = PlantumlLayoutEngine.GRAPHVIZ,
        command: Sequence[str] = ("plantuml",),
        timeout_s: float = 120.0,
    ) -> None:
        self.layout_engine = layout_engine
        self.command = list(command)
        self.timeout_s = timeout_s

    def prepare(self, definition: DiagramDefinition) -> DiagramDefinition:
        return definition.model_copy(
            update={"definition": apply_layout_pragma(definition.definition, self.layout_engine)}
        )

    def render(self, definition: DiagramDefinition) -> str | None:
        result = run_process(
            [*self.command, "-tsvg", "-pipe", "-charset", "UTF-8"],
            input_text=definition.definition,
            timeout_s=self.timeout_s,
        )
        if result.returncode != 0:
            logger.warning(
                f"PlantUML rendering of {definition.key} failed with exit code "
                f"{result.returncode}: {result.stderr.strip()}"
            )
            return None
        return result.stdout
