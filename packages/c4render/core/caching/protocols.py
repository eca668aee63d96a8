"""Protocols for the two render cache tiers.

The memory tier holds rendered content for the lifetime of one renderer
instance; the sentinel tier records freshness on disk and survives restarts.
"""

from pathlib import Path
from typing import Protocol

from c4render.core.rendering.models import RenderedArtifact


class ArtifactCache(Protocol):
    """
    Protocol for the in-process content tier.

    A hit requires exact hash equality; an entry for the same view key
    under another hash is a miss.
    """

    def get(self, view_key: str, hash: str) -> RenderedArtifact | None:
        """
        Return the cached artifact for ``view_key`` rendered under ``hash``.

        Args:
            view_key: View key
            hash: Current cache hash for the view

        Returns:
            Cached artifact, or None on miss/stale entry
        """
        ...

    def put(self, view_key: str, hash: str, artifact: RenderedArtifact) -> None:
        """Store (or overwrite) the artifact for ``view_key``."""
        ...


class FreshnessStore(Protocol):
    """
    Protocol for the on-disk freshness tier.

    Freshness is encoded by a zero-length marker next to the artifact.
    """

    async def is_fresh(self, output_path: Path, hash: str) -> bool:
        """
        Check whether the artifact at ``output_path`` is fresh for ``hash``.

        Returns:
            True if both the artifact and its marker exist
        """
        ...

    async def mark_fresh(self, output_path: Path, hash: str) -> Path:
        """
        Record that ``output_path`` is fresh for ``hash`` (idempotent).

        Returns:
            Path of the marker file

        Raises:
            ArtifactWriteError: On write failure
        """
        ...
