"""Two-tier view cache (memory first, then sentinel markers).

Shared by every renderer variant through composition; the renderer's
identity only enters through the hash.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

from c4render.core.caching.models import CacheOptions
from c4render.core.caching.protocols import ArtifactCache, FreshnessStore
from c4render.core.rendering.models import RenderedArtifact

logger = logging.getLogger(__name__)


class CacheHit(BaseModel):
    """Result of a successful lookup.

    ``artifact`` is only set for memory hits; a sentinel hit means the file
    already on disk is current.
    """

    model_config = ConfigDict(frozen=True)

    tier: Literal["memory", "sentinel"]
    artifact: RenderedArtifact | None = None


class TieredViewCache:
    """
    Memory tier + freshness tier with a fixed lookup order.

    Example:
        >>> cache = TieredViewCache(MemoryCache(), SentinelStore())
        >>> hit = await cache.lookup("context", digest, Path("out/context.svg"))
        >>> if hit is None:
        ...     ...  # render, write, then
        ...     await cache.store("context", digest, Path("out/context.svg"), artifact)
    """

    def __init__(
        self,
        memory: ArtifactCache,
        freshness: FreshnessStore,
        options: CacheOptions | None = None,
    ) -> None:
        self.memory = memory
        self.freshness = freshness
        self.options = options or CacheOptions()

    async def lookup(self, view_key: str, hash: str, output_path: Path) -> CacheHit | None:
        """
        Check memory, then sentinel markers.

        Args:
            view_key: View key
            hash: Current cache hash for the view
            output_path: Where the view's SVG lives

        Returns:
            CacheHit, or None on miss (or when caching is disabled/forced)
        """
        if not self.options.enabled or self.options.force:
            return None

        artifact = self.memory.get(view_key, hash)
        if artifact is not None:
            logger.debug(f"Memory cache hit for view {view_key}")
            return CacheHit(tier="memory", artifact=artifact)

        if await self.freshness.is_fresh(output_path, hash):
            logger.debug(f"Sentinel cache hit for view {view_key}")
            return CacheHit(tier="sentinel")

        return None

    async def store(
        self,
        view_key: str,
        hash: str,
        output_path: Path,
        artifact: RenderedArtifact,
    ) -> None:
        """
        Populate both tiers after the artifact has been written.

        Raises:
            ArtifactWriteError: If the marker cannot be written
        """
        if not self.options.enabled:
            return
        await self.freshness.mark_fresh(output_path, hash)
        self.memory.put(view_key, hash, artifact)
