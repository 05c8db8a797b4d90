"""Ghostscript renderer, the secondary backend."""

from __future__ import annotations

from pathlib import Path

from .base import RasterRenderer


class GhostscriptRenderer(RasterRenderer):
    name = "ghostscript"
    executables = ("gs", "gswin64c", "gswin32c")

    def build_command(self, executable: str, source: Path, output: Path) -> list[str]:
        settings = self.settings
        return [
            executable,
            "-sDEVICE=jpeg",
            "-dNOPAUSE",
            "-dBATCH",
            "-dSAFER",
            "-dQUIET",
            "-dFirstPage=1",
            "-dLastPage=1",
            f"-r{settings.density}",
            f"-g{settings.width}x{settings.height}",
            "-dPDFFitPage",
            f"-dJPEGQ={settings.render_quality}",
            f"-sOutputFile={output}",
            str(source),
        ]
