"""Tests for the C4-PlantUML engine."""

from __future__ import annotations

import subprocess

import pytest

from c4render.core.errors import EngineError
from c4render.core.rendering.models import DiagramDefinition, PlantumlLayoutEngine
from c4render.core.rendering.renderers import plantuml
from c4render.core.rendering.renderers.plantuml import (
    PlantumlEngine,
    apply_layout_pragma,
    plantuml_renderer_id,
)

SOURCE = "@startuml\ntitle Context\nPerson(user, \"User\")\n@enduml\n"


def test_renderer_id_includes_engine() -> None:
    assert plantuml_renderer_id(PlantumlLayoutEngine.ELK) == "C4-PlantUML(elk)"
    assert plantuml_renderer_id(PlantumlLayoutEngine.GRAPHVIZ) == "C4-PlantUML(graphviz)"


def test_pragma_inserted_after_header() -> None:
    result = apply_layout_pragma(SOURCE, PlantumlLayoutEngine.SMETANA)

    assert result.split("\n")[:3] == ["@startuml", "!pragma layout smetana", "title Context"]


def test_pragma_is_replaced_not_duplicated() -> None:
    once = apply_layout_pragma(SOURCE, PlantumlLayoutEngine.ELK)
    switched = apply_layout_pragma(once, PlantumlLayoutEngine.GRAPHVIZ)

    assert apply_layout_pragma(once, PlantumlLayoutEngine.ELK) == once
    assert switched.count("!pragma layout") == 1
    assert "!pragma layout graphviz" in switched


def test_pragma_without_header_goes_first() -> None:
    assert apply_layout_pragma("A -> B", PlantumlLayoutEngine.ELK) == "!pragma layout elk\nA -> B"


def _definition() -> DiagramDefinition:
    return DiagramDefinition(key="context", title="Context", definition=SOURCE, file_extension=".puml")


def test_prepare_applies_configured_engine() -> None:
    prepared = PlantumlEngine(PlantumlLayoutEngine.ELK).prepare(_definition())
    assert "!pragma layout elk" in prepared.definition


def test_render_pipes_definition(monkeypatch) -> None:
    calls = []

    def fake_run(command, *, timeout_s, input_text=None, **kwargs):
        calls.append((command, input_text))
        return subprocess.CompletedProcess(command, 0, stdout="<svg/>", stderr="")

    monkeypatch.setattr(plantuml, "run_process", fake_run)

    svg = PlantumlEngine(command=["java", "-jar", "plantuml.jar"]).render(_definition())

    assert svg == "<svg/>"
    command, stdin = calls[0]
    assert command[:3] == ["java", "-jar", "plantuml.jar"]
    assert "-tsvg" in command and "-pipe" in command
    assert stdin == SOURCE


def test_render_failure_is_soft(monkeypatch) -> None:
    monkeypatch.setattr(
        plantuml,
        "run_process",
        lambda command, **kwargs: subprocess.CompletedProcess(command, 1, stdout="", stderr="syntax"),
    )

    assert PlantumlEngine().render(_definition()) is None


def test_missing_executable_is_fatal() -> None:
    engine = PlantumlEngine(command=["c4render-test-missing-plantuml"])

    with pytest.raises(EngineError, match="Executable not found"):
        engine.render(_definition())
