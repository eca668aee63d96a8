"""Shared utilities for c4render."""

from c4render.core.utils.formatting import safe_file_stem
from c4render.core.utils.logging import configure_logging, log_performance, view_logger

__all__ = [
    "configure_logging",
    "log_performance",
    "safe_file_stem",
    "view_logger",
]
