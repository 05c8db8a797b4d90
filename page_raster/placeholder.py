"""Synthetic substitute images for pages no renderer could rasterize."""

from __future__ import annotations

import io
import logging
import random
from typing import Optional

from .config import RasterSettings
from .imaging import ImagingCapability, resolve_imaging
from .types import PageGeometry
from .utils import format_file_size

_LOGGER = logging.getLogger("page_raster.placeholder")

HEADER_HEIGHT = 220
FOOTER_HEIGHT = 200
BODY_MARGIN = 120
BODY_LINE_COUNT = 28
BODY_LINE_SPACING = 36
BODY_LINE_THICKNESS = 12
MIN_LINE_RATIO = 0.4

BACKGROUND = (255, 255, 255)
BAND_FILL = (243, 244, 246)
BORDER = (229, 231, 235)
LINE_FILL = (209, 213, 219)
HEADING_COLOR = (31, 41, 55)
MUTED_COLOR = (107, 114, 128)


def _font(imaging: ImagingCapability, size: int):
    try:
        return imaging.ImageFont.load_default(size=size)
    except TypeError:
        # Pillow < 10.1 only ships the fixed-size bitmap font.
        return imaging.ImageFont.load_default()


class PlaceholderGenerator:
    """Compose a fixed-layout stand-in page. Never raises."""

    def __init__(
        self,
        settings: RasterSettings | None = None,
        *,
        imaging: ImagingCapability | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or RasterSettings()
        self._imaging = imaging
        self._rng = rng or random.Random()

    @staticmethod
    def degraded(page_number: int, source_size: int = 0) -> bytes:
        """Minimal non-empty buffer used when composition is impossible. Not a JPEG."""
        return f"PLACEHOLDER page={page_number} bytes={source_size}".encode("ascii")

    def generate(
        self,
        page_number: int,
        geometry: Optional[PageGeometry] = None,
        source_size: int = 0,
    ) -> bytes:
        imaging = resolve_imaging(self._imaging)
        if not imaging:
            _LOGGER.warning(
                "Image composition unavailable, degraded placeholder for page %s", page_number
            )
            return self.degraded(page_number, source_size)

        try:
            data = self._compose(imaging, page_number, geometry, source_size)
        except Exception as exc:
            _LOGGER.error("Failed to create placeholder for page %s: %s", page_number, exc)
            return self.degraded(page_number, source_size)

        _LOGGER.info("Created placeholder for page %s, size: %s bytes", page_number, len(data))
        return data

    def _compose(
        self,
        imaging: ImagingCapability,
        page_number: int,
        geometry: Optional[PageGeometry],
        source_size: int,
    ) -> bytes:
        width, height = self.settings.canvas
        image = imaging.Image.new("RGB", (width, height), BACKGROUND)
        draw = imaging.ImageDraw.Draw(image)

        draw.rectangle((0, 0, width - 1, height - 1), outline=BORDER, width=2)

        # Header band
        draw.rectangle((0, 0, width, HEADER_HEIGHT), fill=BAND_FILL)
        draw.text((BODY_MARGIN, 70), f"Page {page_number}", fill=HEADING_COLOR, font=_font(imaging, 64))
        draw.text(
            (BODY_MARGIN, 150),
            "Rendering unavailable - placeholder image",
            fill=MUTED_COLOR,
            font=_font(imaging, 24),
        )

        # Body band: pseudo-text lines, only the widths vary
        body_width = width - 2 * BODY_MARGIN
        top = HEADER_HEIGHT + 80
        for index in range(BODY_LINE_COUNT):
            ratio = self._rng.uniform(MIN_LINE_RATIO, 1.0)
            y = top + index * BODY_LINE_SPACING
            draw.rectangle(
                (BODY_MARGIN, y, BODY_MARGIN + int(body_width * ratio), y + BODY_LINE_THICKNESS),
                fill=LINE_FILL,
            )

        # Footer band
        footer_top = height - FOOTER_HEIGHT
        draw.rectangle((0, footer_top, width, height), fill=BAND_FILL)
        footer_font = _font(imaging, 22)
        if geometry is not None:
            draw.text(
                (BODY_MARGIN, footer_top + 50),
                f"Original size: {geometry}",
                fill=MUTED_COLOR,
                font=footer_font,
            )
        draw.text(
            (BODY_MARGIN, footer_top + 100),
            f"Source size: {format_file_size(source_size)}",
            fill=MUTED_COLOR,
            font=footer_font,
        )

        output = io.BytesIO()
        image.save(output, format="JPEG", quality=self.settings.placeholder_quality)
        return output.getvalue()


__all__ = ["PlaceholderGenerator"]
