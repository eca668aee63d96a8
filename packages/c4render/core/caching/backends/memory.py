"""In-process cache of rendered artifacts.

Amortizes one expensive rendering session across many views and calls.
Entries are never evicted; a newer hash for the same view overwrites them.
"""

import logging

from c4render.core.caching.models import MemoryEntry
from c4render.core.rendering.models import RenderedArtifact

logger = logging.getLogger(__name__)


class MemoryCache:
    """
    Per-renderer in-memory cache keyed by view key.

    Not thread-safe; callers serialize calls to the owning renderer.
    """

    def __init__(self) -> None:
        self._entries: dict[str, MemoryEntry] = {}

    def get(self, view_key: str, hash: str) -> RenderedArtifact | None:
        """Return the artifact if cached under exactly ``hash``."""
        entry = self._entries.get(view_key)
        if entry is None:
            return None
        if entry.hash != hash:
            logger.debug(f"Stale memory entry for view {view_key}")
            return None
        return entry.artifact

    def put(self, view_key: str, hash: str, artifact: RenderedArtifact) -> None:
        """Store (or overwrite) the artifact for ``view_key``."""
        self._entries[view_key] = MemoryEntry(hash=hash, artifact=artifact)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, view_key: object) -> bool:
        return view_key in self._entries
