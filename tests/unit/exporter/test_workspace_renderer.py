"""Tests for WorkspaceRenderer export orchestration."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest

from c4render.core.caching.backends.sentinel import SentinelStore
from c4render.core.caching.fingerprint import build_view_hash
from c4render.core.config.models import AppConfig, RendererConfig
from c4render.core.errors import (
    AgentTimeoutError,
    ArtifactWriteError,
    NoViewsError,
    ViewNotFoundError,
    WorkspaceNotFoundError,
)
from c4render.core.exporter import WorkspaceRenderer
from c4render.core.io import impl_real
from c4render.core.rendering.models import PlantumlLayoutEngine, RendererKind
from c4render.core.rendering.renderers import plantuml
from tests.fakes import FakeAgent, FakeAgentFactory, FakeDiagramExporter, FakeParser


def _touch_later(path: Path) -> None:
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 5_000_000_000))


def _markers(directory: Path) -> list[str]:
    return sorted(p.name for p in directory.iterdir() if p.suffix != ".svg")


@pytest.fixture
def renderer(
    app_config: AppConfig, fake_parser: FakeParser, agent_factory: FakeAgentFactory
) -> WorkspaceRenderer:
    return WorkspaceRenderer(app_config, parser=fake_parser, agent_factory=agent_factory)


class TestStructurizrScenario:
    """Cold and warm cache behavior with the agent-driven renderer."""

    async def test_cold_cache_renders_every_view(
        self,
        renderer: WorkspaceRenderer,
        workspace_file: Path,
        output_dir: Path,
        fake_agent: FakeAgent,
    ) -> None:
        paths = await renderer.render(workspace_file, view_key="context")

        assert paths == {"context": output_dir / "context.svg"}
        assert fake_agent.exported == ["context", "containers"]
        assert (output_dir / "context.svg").is_file()
        assert (output_dir / "containers.svg").is_file()

        for key in ("context", "containers"):
            digest = build_view_hash(workspace_file, None, key, "Structurizr")
            assert SentinelStore.sentinel_path(output_dir / f"{key}.svg", digest).exists()
        assert len(_markers(output_dir)) == 2

    async def test_second_call_hits_cache(
        self,
        renderer: WorkspaceRenderer,
        workspace_file: Path,
        output_dir: Path,
        agent_factory: FakeAgentFactory,
    ) -> None:
        first = await renderer.render(workspace_file, view_key="context")
        second = await renderer.render(workspace_file, view_key="context")
        other = await renderer.render(workspace_file, view_key="containers")

        assert first == second
        assert other == {"containers": output_dir / "containers.svg"}
        assert agent_factory.open_count == 1

    async def test_sentinel_hit_across_renderer_instances(
        self,
        app_config: AppConfig,
        fake_parser: FakeParser,
        workspace_file: Path,
        output_dir: Path,
        sample_views: dict[str, str],
    ) -> None:
        """A fresh process (new memory tier) trusts markers on disk."""
        first_factory = FakeAgentFactory(FakeAgent(sample_views))
        await WorkspaceRenderer(app_config, parser=fake_parser, agent_factory=first_factory).render(
            workspace_file, view_key="context"
        )

        second_factory = FakeAgentFactory(FakeAgent(sample_views))
        exported = await WorkspaceRenderer(
            app_config, parser=fake_parser, agent_factory=second_factory
        ).render_detailed(workspace_file, view_key="context")

        assert second_factory.open_count == 0
        assert exported[0].from_cache
        assert exported[0].svg_path == output_dir / "context.svg"

    async def test_memory_hit_restores_deleted_artifact(
        self,
        renderer: WorkspaceRenderer,
        workspace_file: Path,
        output_dir: Path,
        agent_factory: FakeAgentFactory,
    ) -> None:
        await renderer.render(workspace_file, view_key="context")
        svg = (output_dir / "context.svg").read_text()
        (output_dir / "context.svg").unlink()

        paths = await renderer.render(workspace_file, view_key="context")

        assert agent_factory.open_count == 1
        assert paths["context"].read_text() == svg

    async def test_touching_workspace_invalidates(
        self,
        renderer: WorkspaceRenderer,
        workspace_file: Path,
        output_dir: Path,
        agent_factory: FakeAgentFactory,
    ) -> None:
        await renderer.render(workspace_file, view_key="context")
        _touch_later(workspace_file)

        await renderer.render(workspace_file, view_key="context")

        assert agent_factory.open_count == 2
        # Superseded markers are pruned
        assert len(_markers(output_dir)) == 2

    async def test_touching_layout_invalidates(
        self,
        renderer: WorkspaceRenderer,
        workspace_file: Path,
        layout_file: Path,
        agent_factory: FakeAgentFactory,
        fake_agent: FakeAgent,
        fake_parser: FakeParser,
    ) -> None:
        await renderer.render(workspace_file, layout_path=layout_file, view_key="context")
        _touch_later(layout_file)
        await renderer.render(workspace_file, layout_path=layout_file, view_key="context")

        assert agent_factory.open_count == 2
        # Layout JSON is served verbatim; the parser is not needed
        assert fake_parser.parse_count == 0
        assert fake_agent.origin.workspace_json == layout_file.read_text()

    async def test_force_rerenders(
        self,
        app_config: AppConfig,
        fake_parser: FakeParser,
        agent_factory: FakeAgentFactory,
        workspace_file: Path,
    ) -> None:
        config = app_config.model_copy(
            update={"cache": app_config.cache.model_copy(update={"force": True})}
        )
        renderer = WorkspaceRenderer(config, parser=fake_parser, agent_factory=agent_factory)

        await renderer.render(workspace_file, view_key="context")
        await renderer.render(workspace_file, view_key="context")

        assert agent_factory.open_count == 2

    async def test_render_all_without_view_key(
        self, renderer: WorkspaceRenderer, workspace_file: Path, output_dir: Path
    ) -> None:
        paths = await renderer.render(workspace_file)

        assert paths == {
            "context": output_dir / "context.svg",
            "containers": output_dir / "containers.svg",
        }


class TestFailures:
    """Fatal conditions and soft per-view failures."""

    async def test_missing_view_is_fatal_and_writes_nothing(
        self, renderer: WorkspaceRenderer, workspace_file: Path, output_dir: Path
    ) -> None:
        with pytest.raises(ViewNotFoundError) as exc_info:
            await renderer.render(workspace_file, view_key="deployment")

        assert exc_info.value.view_key == "deployment"
        assert not any(output_dir.iterdir())

    async def test_no_views_is_fatal(
        self, app_config: AppConfig, fake_parser: FakeParser, workspace_file: Path
    ) -> None:
        renderer = WorkspaceRenderer(
            app_config, parser=fake_parser, agent_factory=FakeAgentFactory(FakeAgent({}))
        )

        with pytest.raises(NoViewsError):
            await renderer.render(workspace_file)

    async def test_missing_workspace_is_fatal(
        self, renderer: WorkspaceRenderer, tmp_path: Path, agent_factory: FakeAgentFactory
    ) -> None:
        with pytest.raises(WorkspaceNotFoundError):
            await renderer.render(tmp_path / "missing.dsl", view_key="context")

        assert agent_factory.open_count == 0

    async def test_timeout_writes_nothing(
        self,
        app_config: AppConfig,
        fake_parser: FakeParser,
        workspace_file: Path,
        output_dir: Path,
        sample_views: dict[str, str],
    ) -> None:
        agent = FakeAgent(sample_views, timeout_on={"containers"})
        renderer = WorkspaceRenderer(
            app_config, parser=fake_parser, agent_factory=FakeAgentFactory(agent)
        )

        with pytest.raises(AgentTimeoutError):
            await renderer.render(workspace_file, view_key="context")

        assert not any(output_dir.iterdir())

    async def test_partial_failure_keeps_other_views(
        self,
        app_config: AppConfig,
        fake_parser: FakeParser,
        workspace_file: Path,
        output_dir: Path,
    ) -> None:
        agent = FakeAgent({"a": "A", "b": "B", "c": "C"}, missing_svg={"b"})
        renderer = WorkspaceRenderer(
            app_config, parser=fake_parser, agent_factory=FakeAgentFactory(agent)
        )

        paths = await renderer.render(workspace_file)

        assert sorted(paths) == ["a", "c"]
        assert not (output_dir / "b.svg").exists()

    async def test_skipped_requested_view_returns_empty(
        self,
        app_config: AppConfig,
        fake_parser: FakeParser,
        workspace_file: Path,
        output_dir: Path,
        sample_views: dict[str, str],
    ) -> None:
        agent = FakeAgent(sample_views, missing_svg={"context"})
        renderer = WorkspaceRenderer(
            app_config, parser=fake_parser, agent_factory=FakeAgentFactory(agent)
        )

        assert await renderer.render(workspace_file, view_key="context") == {}
        assert (output_dir / "containers.svg").exists()

    async def test_non_utf8_layout_is_rendering_error(
        self,
        renderer: WorkspaceRenderer,
        workspace_file: Path,
        tmp_path: Path,
        agent_factory: FakeAgentFactory,
    ) -> None:
        layout = tmp_path / "layout.json"
        layout.write_bytes(b'{"name": "\xff\xfe"}')

        with pytest.raises(WorkspaceNotFoundError) as exc_info:
            await renderer.render(workspace_file, layout_path=layout, view_key="context")

        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
        assert agent_factory.open_count == 0


class TestArtifactWrites:
    """Artifacts and markers are replaced atomically; write failures are typed."""

    async def test_failed_rewrite_keeps_previous_artifact(
        self,
        app_config: AppConfig,
        fake_parser: FakeParser,
        workspace_file: Path,
        output_dir: Path,
        sample_views: dict[str, str],
        monkeypatch,
    ) -> None:
        renderer = WorkspaceRenderer(
            app_config, parser=fake_parser, agent_factory=FakeAgentFactory(FakeAgent(sample_views))
        )
        await renderer.render(workspace_file, view_key="context")
        svg_path = output_dir / "context.svg"
        original = svg_path.read_text()

        def no_space(src, dst):
            raise OSError(28, "No space left on device")

        with monkeypatch.context() as patch:
            patch.setattr(impl_real.os, "replace", no_space)
            with pytest.raises(ArtifactWriteError) as exc_info:
                await renderer.render(workspace_file, view_key="context")

        assert isinstance(exc_info.value.__cause__, OSError)
        assert svg_path.read_text() == original
        assert not [p for p in output_dir.iterdir() if p.suffix == ".tmp"]

        second_factory = FakeAgentFactory(FakeAgent(sample_views))
        exported = await WorkspaceRenderer(
            app_config, parser=fake_parser, agent_factory=second_factory
        ).render_detailed(workspace_file, view_key="context")

        assert exported[0].from_cache
        assert second_factory.open_count == 0
        assert exported[0].svg_path.read_text() == original

    async def test_uncreatable_output_directory(
        self,
        renderer: WorkspaceRenderer,
        workspace_file: Path,
        output_dir: Path,
        agent_factory: FakeAgentFactory,
    ) -> None:
        output_dir.write_text("not a directory")

        with pytest.raises(ArtifactWriteError) as exc_info:
            await renderer.render(workspace_file, view_key="context")

        assert isinstance(exc_info.value.__cause__, OSError)
        assert agent_factory.open_count == 0

    async def test_unwritable_artifact(
        self, renderer: WorkspaceRenderer, workspace_file: Path, output_dir: Path
    ) -> None:
        (output_dir / "context.svg").mkdir(parents=True)

        with pytest.raises(ArtifactWriteError) as exc_info:
            await renderer.render(workspace_file, view_key="context")

        assert exc_info.value.view_key == "context"
        assert isinstance(exc_info.value.__cause__, OSError)
        assert not [p for p in output_dir.iterdir() if p.name != "context.svg"]


class TestDefinitionRenderers:
    """PlantUML and Mermaid variants share the cache but render only what is asked."""

    @pytest.fixture
    def plantuml_calls(self, monkeypatch) -> list[str]:
        calls: list[str] = []

        def fake_run(command, *, timeout_s, input_text=None, **kwargs):
            calls.append(input_text)
            return subprocess.CompletedProcess(command, 0, stdout="<svg>puml</svg>", stderr="")

        monkeypatch.setattr(plantuml, "run_process", fake_run)
        return calls

    @pytest.fixture
    def definition_renderer(
        self, app_config: AppConfig, fake_parser: FakeParser
    ) -> WorkspaceRenderer:
        return WorkspaceRenderer(
            app_config,
            parser=fake_parser,
            agent_factory=FakeAgentFactory(FakeAgent({})),
            exporters={RendererKind.PLANTUML_C4: FakeDiagramExporter(".puml")},
        )

    async def test_plantuml_renders_requested_view_only(
        self,
        definition_renderer: WorkspaceRenderer,
        workspace_file: Path,
        output_dir: Path,
        plantuml_calls: list[str],
    ) -> None:
        exported = await definition_renderer.render_detailed(
            workspace_file,
            view_key="context",
            renderer=RendererKind.PLANTUML_C4,
            layout_engine=PlantumlLayoutEngine.ELK,
        )

        assert len(plantuml_calls) == 1
        assert "!pragma layout elk" in plantuml_calls[0]
        assert exported[0].source_path == output_dir / "context.puml"
        assert "!pragma layout elk" in exported[0].source_path.read_text()
        assert exported[0].hash == build_view_hash(
            workspace_file, None, "context", "C4-PlantUML(elk)"
        )
        assert not (output_dir / "containers.svg").exists()

    async def test_layout_engine_change_invalidates(
        self,
        definition_renderer: WorkspaceRenderer,
        workspace_file: Path,
        plantuml_calls: list[str],
    ) -> None:
        for engine in (PlantumlLayoutEngine.ELK, PlantumlLayoutEngine.ELK, PlantumlLayoutEngine.SMETANA):
            await definition_renderer.render(
                workspace_file,
                view_key="context",
                renderer=RendererKind.PLANTUML_C4,
                layout_engine=engine,
            )

        assert len(plantuml_calls) == 2

    async def test_default_layout_engine_is_graphviz(
        self,
        definition_renderer: WorkspaceRenderer,
        caplog,
    ) -> None:
        with caplog.at_level("INFO"):
            variant = definition_renderer.resolve_renderer(RendererKind.PLANTUML_C4)

        assert variant.renderer_id == "C4-PlantUML(graphviz)"
        assert "falling back to graphviz" in caplog.text

    async def test_default_renderer_is_structurizr(
        self, definition_renderer: WorkspaceRenderer, caplog
    ) -> None:
        with caplog.at_level("INFO"):
            variant = definition_renderer.resolve_renderer()

        assert variant.renderer_id == "Structurizr"
        assert variant is definition_renderer.resolve_renderer(RendererKind.STRUCTURIZR)
        assert "falling back to structurizr" in caplog.text

    async def test_renderer_in_filename(
        self,
        app_config: AppConfig,
        fake_parser: FakeParser,
        workspace_file: Path,
        output_dir: Path,
        plantuml_calls: list[str],
    ) -> None:
        config = app_config.model_copy(
            update={"renderer": RendererConfig(include_renderer_in_filename=True)}
        )
        renderer = WorkspaceRenderer(
            config,
            parser=fake_parser,
            exporters={RendererKind.PLANTUML_C4: FakeDiagramExporter(".puml")},
        )

        paths = await renderer.render(
            workspace_file, view_key="context", renderer=RendererKind.PLANTUML_C4
        )

        assert paths["context"] == output_dir / "context-C4-PlantUML_graphviz_.svg"


def test_render_sync(renderer: WorkspaceRenderer, workspace_file: Path, output_dir: Path) -> None:
    assert renderer.render_sync(workspace_file, view_key="context") == {
        "context": output_dir / "context.svg"
    }


def test_rejects_unknown_config_type() -> None:
    with pytest.raises(TypeError):
        WorkspaceRenderer(42)  # type: ignore[arg-type]
