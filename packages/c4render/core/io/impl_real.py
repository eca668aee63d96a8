"""Real filesystem implementation using aiofiles for async I/O.

Provides atomic writes via temp file + os.replace().
"""

import asyncio
import contextlib
import os
import tempfile
import time
from pathlib import Path

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]

from c4render.core.io.models import WriteResult


def _create_temp_file(directory: Path, name: str) -> str:
    fd, tmp_path = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=directory)
    os.close(fd)
    return tmp_path


class RealFileSystem:
    """
    Real filesystem implementation using aiofiles for async I/O.

    Artifacts and markers are written to a temp file in the target directory
    and moved into place with ``os.replace``.
    """

    async def exists(self, path: Path) -> bool:
        """Check existence asynchronously."""
        return bool(await aiofiles.os.path.exists(path))

    async def is_dir(self, path: Path) -> bool:
        """Check if directory asynchronously."""
        return bool(await aiofiles.os.path.isdir(path))

    async def write_text(self, path: Path, content: str, encoding: str = "utf-8") -> WriteResult:
        """Atomically write text file asynchronously."""
        start = time.perf_counter()
        path = Path(path)

        await aiofiles.os.makedirs(path.parent, exist_ok=True)
        tmp_path = await asyncio.to_thread(_create_temp_file, path.parent, path.name)

        try:
            async with aiofiles.open(tmp_path, mode="w", encoding=encoding) as f:
                await f.write(content)
            await asyncio.to_thread(os.replace, tmp_path, path)
        except BaseException:
            with contextlib.suppress(OSError):
                await aiofiles.os.unlink(tmp_path)
            raise

        duration = (time.perf_counter() - start) * 1000
        return WriteResult(
            path=str(path),
            bytes_written=len(content.encode(encoding)),
            duration_ms=duration,
        )

    async def mkdirs(self, path: Path, exist_ok: bool = True) -> None:
        """Create directory and parents asynchronously."""
        await aiofiles.os.makedirs(path, exist_ok=exist_ok)

    async def listdir(self, path: Path) -> list[str]:
        """List directory contents asynchronously."""
        entries: list[str] = await aiofiles.os.listdir(path)
        return entries

    async def remove(self, path: Path) -> None:
        """Remove file asynchronously."""
        await aiofiles.os.unlink(path)
