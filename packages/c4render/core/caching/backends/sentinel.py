"""Filesystem freshness markers.

A zero-length file ``<artifact>.<hash>`` next to an artifact means the
artifact is fresh for that hash. Markers are shared across processes without
locking; concurrent writers may duplicate work but write identical content.
"""

import logging
import re
from pathlib import Path

from c4render.core.errors import ArtifactWriteError
from c4render.core.io import FileSystem, RealFileSystem

logger = logging.getLogger(__name__)

_HASH_SUFFIX_RE = re.compile(r"^[0-9a-f]{64}$")


class SentinelStore:
    """
    Sentinel-file backed freshness store.

    Marking a new hash fresh removes markers of superseded hashes for the
    same artifact so they do not accumulate.
    """

    def __init__(self, fs: FileSystem | None = None, prune_stale: bool = True) -> None:
        """
        Initialize sentinel store.

        Args:
            fs: Async filesystem implementation (defaults to RealFileSystem)
            prune_stale: Remove markers of other hashes when marking fresh
        """
        self.fs = fs or RealFileSystem()
        self._prune_stale = prune_stale

    @staticmethod
    def sentinel_path(output_path: Path, hash: str) -> Path:
        """Compute the marker path for ``output_path`` and ``hash``."""
        return output_path.with_name(f"{output_path.name}.{hash}")

    async def is_fresh(self, output_path: Path, hash: str) -> bool:
        """Check that both the artifact and its marker exist."""
        return await self.fs.exists(output_path) and await self.fs.exists(
            self.sentinel_path(output_path, hash)
        )

    async def mark_fresh(self, output_path: Path, hash: str) -> Path:
        """
        Create the marker for ``hash`` if missing (idempotent).

        Args:
            output_path: Artifact path
            hash: Cache hash the artifact was rendered for

        Returns:
            Marker path

        Raises:
            ArtifactWriteError: If the marker cannot be created
        """
        marker = self.sentinel_path(output_path, hash)
        try:
            if not await self.fs.exists(marker):
                await self.fs.write_text(marker, "")
        except OSError as e:
            raise ArtifactWriteError(f"Failed to write cache marker {marker}", cause=e) from e

        if self._prune_stale:
            await self.prune(output_path, keep_hash=hash)
        return marker

    async def stale_markers(self, output_path: Path, keep_hash: str) -> list[Path]:
        """List markers of ``output_path`` for hashes other than ``keep_hash``."""
        directory = output_path.parent
        if not await self.fs.is_dir(directory):
            return []

        prefix = f"{output_path.name}."
        stale = []
        for name in await self.fs.listdir(directory):
            if not name.startswith(prefix):
                continue
            suffix = name[len(prefix) :]
            if _HASH_SUFFIX_RE.match(suffix) and suffix != keep_hash:
                stale.append(directory / name)
        return sorted(stale)

    async def prune(self, output_path: Path, keep_hash: str) -> int:
        """
        Remove superseded markers of ``output_path``.

        Returns:
            Number of removed markers
        """
        removed = 0
        for marker in await self.stale_markers(output_path, keep_hash):
            try:
                await self.fs.remove(marker)
            except FileNotFoundError:
                continue
            except OSError as e:
                raise ArtifactWriteError(
                    f"Failed to remove stale cache marker {marker}", cause=e
                ) from e
            removed += 1
        if removed:
            logger.debug(f"Pruned {removed} stale marker(s) for {output_path.name}")
        return removed
