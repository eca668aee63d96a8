"""Thin wrapper around external command execution."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from c4render.core.errors import EngineError

logger = logging.getLogger(__name__)


def run_process(
    command: Sequence[str],
    *,
    timeout_s: float,
    input_text: str | None = None,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run an external command and capture its output.

    The return code is not checked; callers decide whether a non-zero exit
    is fatal or a per-view soft failure.

    Args:
        command: Executable and arguments
        timeout_s: Timeout in seconds
        input_text: Text passed on stdin
        cwd: Working directory
        env: Extra environment variables (merged into os.environ)

    Returns:
        Completed process with text stdout/stderr

    Raises:
        EngineError: If the executable is missing, times out, cannot start
            or writes output that is not valid UTF-8
    """
    logger.debug(f"Running: {' '.join(command)}")
    try:
        return subprocess.run(
            list(command),
            input=input_text,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=timeout_s,
            cwd=cwd,
            env={**os.environ, **env} if env else None,
            check=False,  # We'll check returncode manually
        )
    except FileNotFoundError as e:
        raise EngineError(f"Executable not found: {command[0]}", cause=e) from e
    except subprocess.TimeoutExpired as e:
        raise EngineError(f"{command[0]} timed out after {timeout_s}s", cause=e) from e
    except UnicodeDecodeError as e:
        raise EngineError(f"{command[0]} produced output that is not valid UTF-8", cause=e) from e
    except OSError as e:
        raise EngineError(f"Failed to run {command[0]}", cause=e) from e
