"""Async filesystem layer with atomic writes.

Example:
    >>> from c4render.core.io import RealFileSystem
    >>> fs = RealFileSystem()
    >>> await fs.write_text(Path("diagrams/context.svg"), svg)
"""

from c4render.core.io.impl_real import RealFileSystem
from c4render.core.io.models import WriteResult
from c4render.core.io.protocols import FileSystem

__all__ = [
    "FileSystem",
    "RealFileSystem",
    "WriteResult",
]
