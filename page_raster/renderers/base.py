"""Base class for subprocess-backed page rasterizers."""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Sequence

from ..config import RasterSettings
from ..exceptions import RendererError, RendererUnavailableError
from ..utils import ensure_directory, run_subprocess, temp_file_stem, which

_LOGGER = logging.getLogger("page_raster.renderers")

JPEG_SOI = b"\xff\xd8"

_UNRESOLVED = object()


class RasterRenderer(ABC):
    """Rasterize one single-page PDF into JPEG bytes with an external backend.

    Subclasses provide the executable names and the command line; the base
    class owns temp file handling so every variant cleans up the same way.
    """

    name: ClassVar[str]
    executables: ClassVar[Sequence[str]]

    def __init__(
        self,
        settings: RasterSettings | None = None,
        *,
        executable: str | None = None,
        process_timeout: float | None = None,
    ) -> None:
        self.settings = settings or RasterSettings()
        self.process_timeout = process_timeout
        self._executable: object = executable if executable else _UNRESOLVED

    # ------------------------------------------------------------------
    # Backend discovery
    # ------------------------------------------------------------------
    @property
    def executable(self) -> str | None:
        """Resolved backend binary, probed on first access."""
        if self._executable is _UNRESOLVED:
            self._executable = which(self.executables)
            if self._executable is None:
                _LOGGER.debug("%s backend not found on PATH (%s)", self.name, ", ".join(self.executables))
        return self._executable  # type: ignore[return-value]

    def is_available(self) -> bool:
        return self.executable is not None

    # ------------------------------------------------------------------
    # Command construction
    # ------------------------------------------------------------------
    @abstractmethod
    def build_command(self, executable: str, source: Path, output: Path) -> list[str]:
        """Return the command writing page one of *source* as a JPEG to *output*."""

    def output_path(self, source: Path) -> Path:
        return source.with_suffix(".jpg")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render(self, data: bytes, page_number: int) -> bytes:
        executable = self.executable
        if executable is None:
            raise RendererUnavailableError(f"{self.name} is not installed", renderer=self.name)

        workdir = ensure_directory(self.settings.temp_dir)
        source = workdir / f"{temp_file_stem(page_number, self.name)}.pdf"
        output = self.output_path(source)

        try:
            source.write_bytes(data)
            command = self.build_command(executable, source, output)
            try:
                completed = run_subprocess(command, timeout=self.process_timeout)
            except FileNotFoundError as exc:
                raise RendererUnavailableError(
                    f"{self.name} executable could not be started: {exc}", renderer=self.name
                ) from exc
            except subprocess.TimeoutExpired as exc:
                raise RendererError(f"{self.name} exceeded {self.process_timeout}s", renderer=self.name) from exc

            if completed.returncode != 0:
                stderr = completed.stderr.decode("utf-8", errors="replace").strip()
                raise RendererError(
                    f"{self.name} exited with code {completed.returncode}: {stderr[-500:]}",
                    renderer=self.name,
                )

            if not output.exists():
                raise RendererError(f"{self.name} produced no output file", renderer=self.name)
            image = output.read_bytes()
            if not image.startswith(JPEG_SOI):
                raise RendererError(
                    f"{self.name} produced an invalid JPEG ({len(image)} bytes)", renderer=self.name
                )
        except OSError as exc:
            raise RendererError(f"{self.name} I/O failure: {exc}", renderer=self.name) from exc
        finally:
            for path in (source, output):
                try:
                    path.unlink(missing_ok=True)
                except OSError as exc:
                    _LOGGER.warning("Failed to delete temp file %s: %s", path, exc)

        _LOGGER.info("%s rendered page %s (%s bytes)", self.name, page_number, len(image))
        return image

    def __repr__(self) -> str:
        return f"{type(self).__name__}(executable={self._executable if self._executable is not _UNRESOLVED else None!r})"


__all__ = ["RasterRenderer", "JPEG_SOI"]
