"""Re-encode rendered pages as progressive JPEGs within the target canvas."""

from __future__ import annotations

import io
import logging

from .config import RasterSettings
from .imaging import ImagingCapability, resolve_imaging

_LOGGER = logging.getLogger("page_raster.optimizer")


class ImageOptimizer:
    """Shrink-to-fit and recompress page images; passthrough when Pillow is absent."""

    def __init__(
        self,
        settings: RasterSettings | None = None,
        *,
        imaging: ImagingCapability | None = None,
    ) -> None:
        self.settings = settings or RasterSettings()
        self._imaging = imaging

    @property
    def imaging(self) -> ImagingCapability:
        return resolve_imaging(self._imaging)

    def optimize(self, data: bytes) -> bytes:
        imaging = self.imaging
        if not imaging:
            return data

        try:
            with imaging.Image.open(io.BytesIO(data)) as img:
                image = img.convert("RGB")
                # thumbnail() keeps the aspect ratio and never enlarges.
                image.thumbnail(self.settings.canvas, imaging.Image.LANCZOS)
                output = io.BytesIO()
                image.save(
                    output,
                    format="JPEG",
                    quality=self.settings.optimize_quality,
                    progressive=True,
                    optimize=True,
                )
        except Exception as exc:
            _LOGGER.debug("Skipping image optimisation due to error: %s", exc)
            return data

        optimized = output.getvalue()
        _LOGGER.debug("Optimised image from %s to %s bytes", len(data), len(optimized))
        return optimized


__all__ = ["ImageOptimizer"]
