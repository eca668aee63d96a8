"""Models for the render cache.

Provides the cache key, the memory-tier entry and per-call cache options.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from c4render.core.rendering.models import RenderedArtifact


class CacheKey(BaseModel):
    """
    Freshness inputs for one (view, renderer) pair.

    Two keys with identical fields always produce the same digest; changing
    any field changes it. Timestamps are integer milliseconds, ``0`` when the
    file could not be read.
    """

    model_config = ConfigDict(frozen=True)

    renderer: str = Field(description="Renderer identity, including sub-configuration")
    view_key: str = Field(description="Key of the rendered view")
    workspace_path: str = Field(description="Absolute workspace source path")
    workspace_mtime: int = Field(default=0, description="Workspace mtime in ms (0 if unreadable)")
    layout_path: str | None = Field(default=None, description="Absolute layout source path")
    layout_mtime: int | None = Field(default=None, description="Layout mtime in ms")

    def digest(self) -> str:
        """Return the SHA256 hex digest for this key."""
        from c4render.core.caching.fingerprint import digest_fields

        return digest_fields(self.hash_fields())

    def hash_fields(self) -> list[tuple[str, str]]:
        """Return the ``(name, value)`` pairs fed to the digest, in order.

        The order is part of the on-disk cache format.
        """
        fields = [
            ("renderer", self.renderer),
            ("viewKey", self.view_key),
            ("wsPath", self.workspace_path),
            ("wsMtime", str(self.workspace_mtime)),
        ]
        if self.layout_path is not None:
            fields.append(("wsJsonPath", self.layout_path))
            fields.append(("wsJsonMtime", str(self.layout_mtime or 0)))
        return fields

    def __str__(self) -> str:
        return f"{self.renderer}:{self.view_key}"


class MemoryEntry(BaseModel):
    """In-memory cache entry: the hash a render was produced for, and its content."""

    model_config = ConfigDict(frozen=True)

    hash: str
    artifact: RenderedArtifact


class CacheOptions(BaseModel):
    """
    Per-call cache behavior configuration.
    """

    enabled: bool = Field(default=True, description="Global cache toggle for this call")
    force: bool = Field(
        default=False,
        description="Ignore cache and re-render (still stores if enabled)",
    )
