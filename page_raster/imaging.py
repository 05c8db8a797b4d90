"""Lazy access to the optional Pillow image-composition capability.

Pillow may be missing, or fail to load its native parts, on some deployment
targets. Callers ask :func:`load_imaging` and branch on the result instead of
importing Pillow themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Union

_LOGGER = logging.getLogger("page_raster.imaging")


@dataclass(frozen=True)
class Imaging:
    """Loaded Pillow modules."""

    Image: Any
    ImageDraw: Any
    ImageFont: Any

    @property
    def available(self) -> bool:
        return True


class _Unavailable:
    available = False

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "IMAGING_UNAVAILABLE"


IMAGING_UNAVAILABLE = _Unavailable()

ImagingCapability = Union[Imaging, _Unavailable]


@lru_cache(maxsize=1)
def load_imaging() -> ImagingCapability:
    """Return the Pillow modules, or :data:`IMAGING_UNAVAILABLE`."""

    try:
        from PIL import Image, ImageDraw, ImageFont
    except Exception as exc:  # pragma: no cover - depends on the host
        _LOGGER.warning("Image composition unavailable: %s", exc)
        return IMAGING_UNAVAILABLE
    return Imaging(Image=Image, ImageDraw=ImageDraw, ImageFont=ImageFont)


def resolve_imaging(imaging: ImagingCapability | None) -> ImagingCapability:
    return load_imaging() if imaging is None else imaging


__all__ = ["Imaging", "IMAGING_UNAVAILABLE", "ImagingCapability", "load_imaging", "resolve_imaging"]
