"""Tests for cache key fingerprinting."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

import pytest

from c4render.core.caching.fingerprint import (
    build_cache_key,
    build_view_hash,
    digest_fields,
    mtime_millis,
    normalize_text,
)


def test_normalize_text_unifies_line_endings() -> None:
    assert normalize_text("a\r\nb") == b"a\nb"
    assert normalize_text(None) == b""


def test_digest_fields_feeds_fields_in_order() -> None:
    """Digest equals SHA256 over the concatenated name=value strings."""
    expected = hashlib.sha256(b"renderer=Structurizr" + b"viewKey=context").hexdigest()
    assert digest_fields([("renderer", "Structurizr"), ("viewKey", "context")]) == expected


def test_mtime_millis_missing_file_is_zero(tmp_path: Path) -> None:
    assert mtime_millis(tmp_path / "missing.dsl") == 0


def test_mtime_millis_uses_milliseconds(workspace_file: Path) -> None:
    os.utime(workspace_file, ns=(1_700_000_000_123_456_789, 1_700_000_000_123_456_789))
    assert mtime_millis(workspace_file) == 1_700_000_000_123


class TestBuildViewHash:
    """Tests for build_view_hash."""

    def test_is_deterministic(self, workspace_file: Path, layout_file: Path) -> None:
        first = build_view_hash(workspace_file, layout_file, "context", "Structurizr")
        second = build_view_hash(workspace_file, layout_file, "context", "Structurizr")

        assert first == second
        assert len(first) == 64

    def test_matches_field_order(self, workspace_file: Path) -> None:
        """Hash covers renderer, view key, path and mtime, in that order."""
        mtime = mtime_millis(workspace_file)
        expected = hashlib.sha256(
            b"renderer=Mermaid"
            + b"viewKey=context"
            + f"wsPath={workspace_file.absolute()}".encode()
            + f"wsMtime={mtime}".encode()
        ).hexdigest()

        assert build_view_hash(workspace_file, None, "context", "Mermaid") == expected

    @pytest.mark.parametrize(
        "changed",
        [
            {"view_key": "containers"},
            {"renderer": "Mermaid"},
            {"renderer": "C4-PlantUML(elk)"},
        ],
    )
    def test_changes_with_identity_fields(self, workspace_file: Path, changed: dict) -> None:
        base = {"view_key": "context", "renderer": "C4-PlantUML(graphviz)"}
        original = build_view_hash(workspace_file, None, **base)
        modified = build_view_hash(workspace_file, None, **{**base, **changed})

        assert original != modified

    def test_changes_with_workspace_path(self, workspace_file: Path, tmp_path: Path) -> None:
        other = tmp_path / "other.dsl"
        other.write_text(workspace_file.read_text())
        os.utime(other, ns=(workspace_file.stat().st_atime_ns, workspace_file.stat().st_mtime_ns))

        assert build_view_hash(workspace_file, None, "context", "Structurizr") != build_view_hash(
            other, None, "context", "Structurizr"
        )

    def test_changes_with_workspace_mtime(self, workspace_file: Path) -> None:
        before = build_view_hash(workspace_file, None, "context", "Structurizr")
        stat = workspace_file.stat()
        os.utime(workspace_file, ns=(stat.st_atime_ns, stat.st_mtime_ns + 5_000_000_000))

        assert build_view_hash(workspace_file, None, "context", "Structurizr") != before

    def test_changes_with_layout_presence_and_mtime(
        self, workspace_file: Path, layout_file: Path
    ) -> None:
        without_layout = build_view_hash(workspace_file, None, "context", "Structurizr")
        with_layout = build_view_hash(workspace_file, layout_file, "context", "Structurizr")
        stat = layout_file.stat()
        os.utime(layout_file, ns=(stat.st_atime_ns, stat.st_mtime_ns + 5_000_000_000))
        touched_layout = build_view_hash(workspace_file, layout_file, "context", "Structurizr")

        assert len({without_layout, with_layout, touched_layout}) == 3

    def test_missing_files_still_hash(self, tmp_path: Path) -> None:
        key = build_cache_key(tmp_path / "nope.dsl", tmp_path / "nope.json", "context", "Mermaid")

        assert key.workspace_mtime == 0
        assert key.layout_mtime == 0
        assert len(key.digest()) == 64

    def test_cache_key_paths_are_absolute(self, workspace_file: Path, monkeypatch) -> None:
        monkeypatch.chdir(workspace_file.parent)
        relative = build_view_hash(Path(workspace_file.name), None, "context", "Structurizr")

        assert relative == build_view_hash(workspace_file, None, "context", "Structurizr")
