"""Temp file and page buffer cleanup.

Every operation here is best effort: failures are logged and never raised.
"""

from __future__ import annotations

import gc
import logging
import re
import time
from pathlib import Path
from typing import Iterable, Optional, Pattern, Union

from .types import PageFile
from .utils import TEMP_MARKER

LOGGER = logging.getLogger("page_raster.janitor")

PatternLike = Union[str, Pattern[str]]

_NUMERIC_PREFIX = re.compile(r"^\d+")


def looks_like_temp_file(name: str) -> bool:
    """Heuristic for renderer temp files: numeric prefix or the page marker."""

    return bool(_NUMERIC_PREFIX.match(name)) or TEMP_MARKER in name


class ResourceJanitor:
    """Delete renderer temp files and release page buffers."""

    def __init__(self, directory: Optional[Union[str, Path]] = None, *, stale_age_hours: float = 1.0) -> None:
        self.directory = Path(directory) if directory is not None else None
        self.stale_age_hours = stale_age_hours

    def _resolve(self, directory: Optional[Union[str, Path]]) -> Optional[Path]:
        if directory is not None:
            return Path(directory)
        return self.directory

    @staticmethod
    def _candidates(directory: Path, pattern: Optional[PatternLike]) -> Iterable[Path]:
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        for path in sorted(directory.iterdir()):
            if not path.is_file():
                continue
            if compiled is not None:
                if not compiled.search(path.name):
                    continue
            elif not looks_like_temp_file(path.name):
                continue
            yield path

    def cleanup_by_pattern(
        self,
        directory: Optional[Union[str, Path]] = None,
        pattern: Optional[PatternLike] = None,
    ) -> int:
        """Delete files matching *pattern*, or the temp file heuristic when omitted."""

        target = self._resolve(directory)
        if target is None or not target.is_dir():
            LOGGER.debug("Directory %s does not exist, nothing to clean up", target)
            return 0

        deleted = 0
        try:
            for path in self._candidates(target, pattern):
                try:
                    path.unlink()
                except FileNotFoundError:
                    continue
                except OSError as exc:
                    LOGGER.warning("Failed to delete temp file %s: %s", path.name, exc)
                    continue
                deleted += 1
                LOGGER.debug("Deleted temp file: %s", path.name)
        except (OSError, re.error) as exc:
            LOGGER.error("Error during temp file cleanup in %s: %s", target, exc)

        LOGGER.info("Cleanup complete. Deleted %s temporary files from %s", deleted, target)
        return deleted

    def cleanup_by_age(
        self,
        directory: Optional[Union[str, Path]] = None,
        max_age_hours: Optional[float] = None,
    ) -> int:
        """Delete heuristic-matching files not modified for *max_age_hours*."""

        target = self._resolve(directory)
        if target is None or not target.is_dir():
            return 0

        age_hours = self.stale_age_hours if max_age_hours is None else max_age_hours
        cutoff = time.time() - age_hours * 3600
        deleted = 0
        try:
            for path in self._candidates(target, None):
                try:
                    if path.stat().st_mtime >= cutoff:
                        continue
                    path.unlink()
                except FileNotFoundError:
                    continue
                except OSError as exc:
                    LOGGER.warning("Error processing file %s: %s", path.name, exc)
                    continue
                deleted += 1
                LOGGER.debug("Deleted stale temp file: %s", path.name)
        except OSError as exc:
            LOGGER.error("Error during stale file cleanup in %s: %s", target, exc)

        LOGGER.info("Deleted %s files older than %s hours from %s", deleted, age_hours, target)
        return deleted

    @staticmethod
    def delete_temp_file(path: Union[str, Path]) -> bool:
        """Delete a single file; ``False`` when it was missing or undeletable."""

        try:
            Path(path).unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            LOGGER.error("Failed to delete temp file %s: %s", path, exc)
            return False
        LOGGER.debug("Deleted temp file: %s", path)
        return True

    @staticmethod
    def clear_buffers(pages: Iterable[PageFile], *, collect: bool = True) -> int:
        """Release every page buffer. The collector hint is advisory only."""

        cleared = 0
        try:
            for page in pages:
                page.release()
                cleared += 1
        except Exception as exc:
            LOGGER.error("Error clearing page buffers: %s", exc)

        LOGGER.debug("Cleared %s page buffers", cleared)
        if collect:
            gc.collect()
        return cleared

    def full_cleanup(
        self,
        pages: Optional[Iterable[PageFile]] = None,
        directory: Optional[Union[str, Path]] = None,
    ) -> None:
        """Release buffers, sweep temp files and stale files. Never raises."""

        try:
            if pages:
                self.clear_buffers(pages)
            self.cleanup_by_pattern(directory)
            self.cleanup_by_age(directory)
        except Exception as exc:
            LOGGER.error("Error during full cleanup: %s", exc)


__all__ = ["ResourceJanitor", "looks_like_temp_file"]
