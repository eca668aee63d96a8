"""Render cache for c4render.

Decides whether a view needs re-rendering:
- Deterministic cache hash from renderer, view key and source timestamps
- Memory tier (rendered content, per renderer instance)
- Sentinel tier (zero-length ``<artifact>.<hash>`` markers on disk)
- Lookup order memory -> sentinel; either hit skips rendering
"""

from c4render.core.caching.backends.memory import MemoryCache
from c4render.core.caching.backends.null import NullCache, NullFreshnessStore
from c4render.core.caching.backends.sentinel import SentinelStore
from c4render.core.caching.fingerprint import build_cache_key, build_view_hash, mtime_millis
from c4render.core.caching.models import CacheKey, CacheOptions, MemoryEntry
from c4render.core.caching.protocols import ArtifactCache, FreshnessStore
from c4render.core.caching.tiered import CacheHit, TieredViewCache

__all__ = [
    # Core
    "ArtifactCache",
    "FreshnessStore",
    "CacheKey",
    "CacheOptions",
    "MemoryEntry",
    "CacheHit",
    "TieredViewCache",
    # Backends
    "MemoryCache",
    "SentinelStore",
    "NullCache",
    "NullFreshnessStore",
    # Utils
    "build_cache_key",
    "build_view_hash",
    "mtime_millis",
]
