"""Workspace collaborators backed by the Structurizr CLI.

Parses DSL workspaces (``structurizr-cli export -format json``) and exports
diagram definitions (``-format c4plantuml`` / ``-format mermaid``). JSON
workspaces are read directly without invoking the CLI.
"""

from __future__ import annotations

import json
import logging
import tempfile
from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from c4render.core.errors import EngineError, WorkspaceNotFoundError
from c4render.core.rendering.models import DiagramDefinition
from c4render.core.utils.process import run_process
from c4render.core.workspace.models import WorkspaceModel

logger = logging.getLogger(__name__)

# structurizr-cli names exported diagrams "structurizr-<viewKey>.<ext>"
_EXPORT_PREFIX = "structurizr-"


class ExportFormat(str, Enum):
    """Export formats understood by ``structurizr-cli export``."""

    JSON = "json"
    C4PLANTUML = "c4plantuml"
    PLANTUML = "plantuml"
    MERMAID = "mermaid"


FILE_EXTENSIONS = {
    ExportFormat.JSON: ".json",
    ExportFormat.C4PLANTUML: ".puml",
    ExportFormat.PLANTUML: ".puml",
    ExportFormat.MERMAID: ".mmd",
}


class StructurizrCli:
    """Runs ``structurizr-cli export`` and parses its output."""

    def __init__(
        self,
        command: Sequence[str] = ("structurizr-cli",),
        timeout_s: float = 120.0,
    ) -> None:
        self.command = list(command)
        self.timeout_s = timeout_s

    def export(self, workspace_path: Path, fmt: ExportFormat, output_dir: Path) -> list[Path]:
        """
        Export ``workspace_path`` in ``fmt`` into ``output_dir``.

        Returns:
            Files written by the CLI, sorted by name

        Raises:
            EngineError: If the CLI is missing or fails
        """
        result = run_process(
            [
                *self.command,
                "export",
                "-workspace",
                str(workspace_path),
                "-format",
                fmt.value,
                "-output",
                str(output_dir),
            ],
            timeout_s=self.timeout_s,
        )
        if result.returncode != 0:
            raise EngineError(
                f"structurizr-cli export failed with exit code {result.returncode}: "
                f"{result.stderr.strip() or result.stdout.strip()}"
            )
        return sorted(p for p in output_dir.iterdir() if p.is_file())

    def parse(self, path: Path) -> WorkspaceModel:
        """
        Parse a workspace (DSL via the CLI, JSON directly).

        Raises:
            WorkspaceNotFoundError: If the file does not exist
            EngineError: If the CLI fails or produces invalid JSON
        """
        path = Path(path)
        if not path.is_file():
            raise WorkspaceNotFoundError(f"Workspace file not found: {path}")

        if path.suffix.lower() == ".json":
            return WorkspaceModel(source_path=path, content=_read_json(path))

        with tempfile.TemporaryDirectory(prefix="c4render-") as tmp:
            files = [p for p in self.export(path, ExportFormat.JSON, Path(tmp)) if p.suffix == ".json"]
            if not files:
                raise EngineError(f"structurizr-cli produced no JSON for {path}")
            return WorkspaceModel(source_path=path, content=_read_json(files[0]))


class CliDiagramExporter:
    """Exports diagram definitions of one format through the Structurizr CLI."""

    def __init__(self, cli: StructurizrCli, fmt: ExportFormat) -> None:
        if fmt == ExportFormat.JSON:
            raise ValueError("JSON is not a diagram format")
        self.cli = cli
        self.fmt = fmt

    @property
    def file_extension(self) -> str:
        return FILE_EXTENSIONS[self.fmt]

    def export_diagrams(self, workspace: WorkspaceModel) -> dict[str, DiagramDefinition]:
        """Export every view of ``workspace`` as a definition keyed by view key."""
        titles = {view.key: view.title for view in workspace.views()}

        definitions: dict[str, DiagramDefinition] = {}
        with tempfile.TemporaryDirectory(prefix="c4render-") as tmp:
            for file in self.cli.export(workspace.source_path, self.fmt, Path(tmp)):
                if file.suffix != self.file_extension:
                    continue
                key = file.stem.removeprefix(_EXPORT_PREFIX)
                if titles and key not in titles:
                    # Legends and other auxiliary diagrams
                    logger.debug(f"Ignoring exported file {file.name}")
                    continue
                try:
                    text = file.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as e:
                    raise EngineError(
                        f"Unable to read exported diagram {file.name}", view_key=key, cause=e
                    ) from e
                definitions[key] = DiagramDefinition(
                    key=key,
                    title=titles.get(key, key),
                    definition=text,
                    file_extension=self.file_extension,
                )
        return definitions


def _read_json(path: Path) -> dict:
    try:
        content = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        # ValueError covers both malformed JSON and invalid UTF-8
        raise EngineError(f"Unable to read workspace JSON {path}", cause=e) from e
    if not isinstance(content, dict):
        raise EngineError(f"Workspace JSON {path} is not an object")
    return content
