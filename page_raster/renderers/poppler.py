"""Poppler ``pdftoppm`` renderer, the primary backend."""

from __future__ import annotations

from pathlib import Path

from .base import RasterRenderer


class PopplerRenderer(RasterRenderer):
    name = "poppler"
    executables = ("pdftoppm",)

    def build_command(self, executable: str, source: Path, output: Path) -> list[str]:
        settings = self.settings
        return [
            executable,
            "-jpeg",
            "-singlefile",
            "-f",
            "1",
            "-l",
            "1",
            "-r",
            str(settings.density),
            "-scale-to-x",
            str(settings.width),
            "-scale-to-y",
            str(settings.height),
            "-jpegopt",
            f"quality={settings.render_quality}",
            str(source),
            # -singlefile appends ".jpg" to this root
            str(output.with_suffix("")),
        ]
