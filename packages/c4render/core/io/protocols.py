"""Protocol for the filesystem operations used by the render cache and exporter."""

from pathlib import Path
from typing import Protocol

from c4render.core.io.models import WriteResult


class FileSystem(Protocol):
    """
    Protocol for async filesystem operations.

    Implementations must write atomically: readers see either the previous
    content of a file or the new content, never a partial write.
    """

    async def exists(self, path: Path) -> bool:
        """Check if path exists (file or directory)."""
        ...

    async def is_dir(self, path: Path) -> bool:
        """Check if path exists and is a directory."""
        ...

    async def write_text(self, path: Path, content: str, encoding: str = "utf-8") -> WriteResult:
        """
        Atomically write text to file.

        Args:
            path: Target file path
            content: Text to write
            encoding: Text encoding

        Returns:
            WriteResult with metadata

        Raises:
            OSError: On write failure; the previous file content is kept
        """
        ...

    async def mkdirs(self, path: Path, exist_ok: bool = True) -> None:
        """
        Create directory and all parents.

        Raises:
            OSError: On creation failure
        """
        ...

    async def listdir(self, path: Path) -> list[str]:
        """
        List directory contents (names only).

        Raises:
            FileNotFoundError: If directory doesn't exist
        """
        ...

    async def remove(self, path: Path) -> None:
        """
        Remove a file.

        Raises:
            FileNotFoundError: If file doesn't exist
            OSError: On removal failure
        """
        ...
