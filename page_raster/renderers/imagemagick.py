"""ImageMagick renderer (delegates PDF decoding to Ghostscript)."""

from __future__ import annotations

from pathlib import Path

from .base import RasterRenderer


class ImageMagickRenderer(RasterRenderer):
    name = "imagemagick"
    executables = ("magick", "convert")

    def build_command(self, executable: str, source: Path, output: Path) -> list[str]:
        settings = self.settings
        return [
            executable,
            "-density",
            str(settings.density),
            f"{source}[0]",
            "-background",
            "white",
            "-flatten",
            "-resize",
            f"{settings.width}x{settings.height}",
            "-quality",
            str(settings.render_quality),
            f"jpeg:{output}",
        ]
