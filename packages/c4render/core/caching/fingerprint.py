"""Fingerprinting utilities for render cache keys.

Provides stable input hashing for deterministic cache keys.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable
from pathlib import Path

from c4render.core.caching.models import CacheKey

logger = logging.getLogger(__name__)


def normalize_text(text: str | None) -> bytes:
    """Encode text for hashing.

    Only line endings are unified (CRLF -> LF); no Unicode normalization.
    """
    if text is None:
        return b""
    return text.replace("\r\n", "\n").encode("utf-8")


def digest_fields(fields: Iterable[tuple[str, str]]) -> str:
    """
    Feed ``name=value`` strings into SHA256 in the given order.

    Args:
        fields: Ordered ``(name, value)`` pairs

    Returns:
        SHA256 hex digest (64 chars, lowercase)

    Example:
        >>> digest_fields([("renderer", "Structurizr"), ("viewKey", "context")])
        '5f0c...'
    """
    md = hashlib.sha256()
    for name, value in fields:
        md.update(normalize_text(f"{name}={value}"))
    return md.hexdigest()


def mtime_millis(path: Path) -> int:
    """Return the last-modified time of ``path`` in ms, or 0 if unreadable."""
    try:
        return path.stat().st_mtime_ns // 1_000_000
    except OSError as e:
        logger.debug(f"Unable to read mtime of {path}: {e}")
        return 0


def build_cache_key(
    workspace_path: Path,
    layout_path: Path | None,
    view_key: str,
    renderer: str,
) -> CacheKey:
    """Collect the freshness inputs for one view into a CacheKey.

    Args:
        workspace_path: Workspace source (DSL or JSON)
        layout_path: Optional layout source overriding auto-layout
        view_key: Key of the view
        renderer: Renderer identity string

    Returns:
        CacheKey with absolute paths and millisecond timestamps
    """
    return CacheKey(
        renderer=renderer,
        view_key=view_key,
        workspace_path=str(Path(workspace_path).absolute()),
        workspace_mtime=mtime_millis(Path(workspace_path)),
        layout_path=str(Path(layout_path).absolute()) if layout_path is not None else None,
        layout_mtime=mtime_millis(Path(layout_path)) if layout_path is not None else None,
    )


def build_view_hash(
    workspace_path: Path,
    layout_path: Path | None,
    view_key: str,
    renderer: str,
) -> str:
    """
    Compute the cache hash for one (workspace, view, renderer) triple.

    Deterministic across processes; the only side effect is reading file
    timestamps, which never raises.

    Args:
        workspace_path: Workspace source (DSL or JSON)
        layout_path: Optional layout source
        view_key: Key of the view
        renderer: Renderer identity string (e.g. ``C4-PlantUML(elk)``)

    Returns:
        SHA256 hex digest (64 chars)
    """
    return build_cache_key(workspace_path, layout_path, view_key, renderer).digest()
