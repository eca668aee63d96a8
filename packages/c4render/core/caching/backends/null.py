"""No-op cache tiers for forced or cache-less runs.

Always report a miss, discard all stores.
"""

from pathlib import Path

from c4render.core.rendering.models import RenderedArtifact


class NullCache:
    """
    No-op memory tier.

    Always reports cache miss, discards all stores.
    """

    def get(self, view_key: str, hash: str) -> RenderedArtifact | None:
        """Always returns None."""
        return None

    def put(self, view_key: str, hash: str, artifact: RenderedArtifact) -> None:
        """Discard."""
        pass


class NullFreshnessStore:
    """
    No-op sentinel tier.

    Never fresh, never writes markers.
    """

    async def is_fresh(self, output_path: Path, hash: str) -> bool:
        """Always returns False."""
        return False

    async def mark_fresh(self, output_path: Path, hash: str) -> Path:
        """Return the would-be marker path without creating it."""
        return output_path.with_name(f"{output_path.name}.{hash}")
