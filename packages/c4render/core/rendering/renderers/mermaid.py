"""Mermaid renderer: Mermaid definitions rendered by the Mermaid CLI (``mmdc``)."""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Sequence
from pathlib import Path

from c4render.core.errors import EngineError
from c4render.core.rendering.models import DiagramDefinition
from c4render.core.utils.process import run_process

logger = logging.getLogger(__name__)

RENDERER_ID = "Mermaid"


class MermaidEngine:
    """Renders Mermaid definitions with ``mmdc -i <in.mmd> -o <out.svg>``.

    Requires the Mermaid CLI, e.g. ``npm install -g @mermaid-js/mermaid-cli``.
    """

    def __init__(self, command: Sequence[str] = ("mmdc",), timeout_s: float = 120.0) -> None:
        self.command = list(command)
        self.timeout_s = timeout_s

    def prepare(self, definition: DiagramDefinition) -> DiagramDefinition:
        return definition

    def render(self, definition: DiagramDefinition) -> str | None:
        with tempfile.TemporaryDirectory(prefix="c4render-mmdc-") as tmp:
            source = Path(tmp) / "diagram.mmd"
            target = Path(tmp) / "diagram.svg"
            try:
                source.write_text(definition.definition, encoding="utf-8")
            except OSError as e:
                raise EngineError(
                    "Failed to write Mermaid source", view_key=definition.key, cause=e
                ) from e

            result = run_process(
                [*self.command, "-i", str(source), "-o", str(target)],
                timeout_s=self.timeout_s,
            )
            if result.returncode != 0 or not target.is_file():
                logger.warning(
                    f"Mermaid rendering of {definition.key} failed with exit code "
                    f"{result.returncode}: {result.stderr.strip()}"
                )
                return None

            logger.debug(f"Mermaid diagram rendered successfully: {definition.key}")
            try:
                return target.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise EngineError(
                    "Unable to read Mermaid output", view_key=definition.key, cause=e
                ) from e
