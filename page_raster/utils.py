"""Utility helpers for :mod:`page_raster`."""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path
from typing import Sequence

_LOGGER = logging.getLogger("page_raster")

TEMP_MARKER = "page_"


def configure_logging(verbose: bool = False) -> None:
    """Configure package-wide logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def which(executables: Sequence[str]) -> str | None:
    """Return the first executable from *executables* found on ``PATH``."""

    for candidate in executables:
        found = shutil.which(candidate)
        if found:
            _LOGGER.debug("Detected external tool: %s -> %s", candidate, found)
            return found
    return None


def run_subprocess(
    command: Sequence[str],
    *,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[bytes]:
    """Run *command* capturing output without raising on a non-zero exit.

    ``FileNotFoundError`` propagates when the executable cannot be spawned.
    """

    _LOGGER.debug("Executing command: %s", " ".join(command))
    completed = subprocess.run(
        list(command),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        check=False,
        timeout=timeout,
    )
    _LOGGER.debug("Command finished with exit code %s", completed.returncode)
    return completed


def temp_file_stem(page_number: int, tag: str = "") -> str:
    """Build a temp file stem from the current time and the page number.

    Unique only while pages are processed sequentially.
    """

    stem = f"{time.time_ns() // 1_000_000}_{TEMP_MARKER}{page_number}"
    return f"{stem}_{tag}" if tag else stem


def ensure_directory(path: str | Path) -> Path:
    """Create *path* if it does not exist and return it."""

    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def file_stem(file_name: str) -> str:
    """Return *file_name* without its final extension."""

    name = Path(file_name).name
    stem, dot, _ = name.rpartition(".")
    return stem if dot and stem else name


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "500 KB")
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"
