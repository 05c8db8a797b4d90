"""Rasterization backends for page-raster."""

from __future__ import annotations

from typing import List

from ..config import RasterSettings
from .base import JPEG_SOI, RasterRenderer
from .ghostscript import GhostscriptRenderer
from .imagemagick import ImageMagickRenderer
from .poppler import PopplerRenderer

RENDERER_CLASSES = (PopplerRenderer, GhostscriptRenderer, ImageMagickRenderer)


def default_renderers(settings: RasterSettings | None = None) -> List[RasterRenderer]:
    """Return one instance of every renderer in priority order."""

    return [renderer_class(settings) for renderer_class in RENDERER_CLASSES]


__all__ = [
    "JPEG_SOI",
    "RasterRenderer",
    "PopplerRenderer",
    "GhostscriptRenderer",
    "ImageMagickRenderer",
    "RENDERER_CLASSES",
    "default_renderers",
]
