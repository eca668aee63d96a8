"""Cache tier backends."""

from c4render.core.caching.backends.memory import MemoryCache
from c4render.core.caching.backends.null import NullCache, NullFreshnessStore
from c4render.core.caching.backends.sentinel import SentinelStore

__all__ = [
    "MemoryCache",
    "NullCache",
    "NullFreshnessStore",
    "SentinelStore",
]
