"""Runtime settings and environment detection for :mod:`page_raster`."""

from __future__ import annotations

import logging
import math
import os
import tempfile
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping

LOGGER = logging.getLogger("page_raster.config")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

RESTRICTED_ENV_VAR = "PAGE_RASTER_RESTRICTED"

# Hosting platforms where native rasterizers are usually missing or sandboxed.
RESTRICTED_HOST_MARKERS = (
    "WEBSITE_SITE_NAME",
    "WEBSITE_INSTANCE_ID",
    "AWS_LAMBDA_FUNCTION_NAME",
    "VERCEL",
)


def _parse_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return None


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        value = None
    if value is None or not math.isfinite(value) or value <= 0:
        LOGGER.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default
    return value


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        value = None
    if value is None or value <= 0:
        LOGGER.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default
    return value


def default_temp_dir() -> Path:
    return Path(tempfile.gettempdir()) / "page-raster"


def detect_restricted_environment(env: Mapping[str, str] | None = None) -> bool:
    """Return ``True`` when native rasterizers should not be relied upon.

    ``PAGE_RASTER_RESTRICTED`` wins when set to a boolean value; otherwise the
    presence of a known restricted-host marker decides.
    """

    env = os.environ if env is None else env
    explicit = _parse_bool(env.get(RESTRICTED_ENV_VAR))
    if explicit is not None:
        return explicit
    for marker in RESTRICTED_HOST_MARKERS:
        if env.get(marker):
            LOGGER.debug("Restricted host detected via %s", marker)
            return True
    return False


@dataclass(frozen=True)
class RasterSettings:
    """
    Fixed rendering parameters shared by every component.

    Attributes:
        density: Raster density in dpi passed to the backends
        width: Target canvas width in pixels
        height: Target canvas height in pixels
        render_quality: JPEG quality requested from the backends
        optimize_quality: JPEG quality used by the optimizer
        placeholder_quality: JPEG quality used for placeholder pages
        deadline: Seconds a restricted-mode attempt may take
        restricted: Force restricted (``True``) or unrestricted (``False``); ``None`` detects
        temp_dir: Directory for renderer temp files
        stale_age_hours: Age threshold for the stale file sweep
    """

    density: int = 200
    width: int = 1240
    height: int = 1754
    render_quality: int = 90
    optimize_quality: int = 90
    placeholder_quality: int = 85
    deadline: float = 10.0
    restricted: bool | None = None
    temp_dir: Path = field(default_factory=default_temp_dir)
    stale_age_hours: float = 1.0

    def __post_init__(self) -> None:
        if not isinstance(self.temp_dir, Path):
            object.__setattr__(self, "temp_dir", Path(self.temp_dir))
        if not self.deadline > 0:
            raise ValueError("deadline must be positive")
        if self.width < 1 or self.height < 1:
            raise ValueError("canvas dimensions must be positive")

    @property
    def canvas(self) -> tuple[int, int]:
        return (self.width, self.height)

    def is_restricted(self, env: Mapping[str, str] | None = None) -> bool:
        if self.restricted is not None:
            return self.restricted
        return detect_restricted_environment(env)

    def with_updates(self, **changes: object) -> "RasterSettings":
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "RasterSettings":
        env = os.environ if env is None else env
        defaults = cls()
        temp_dir = env.get("PAGE_RASTER_TMPDIR")
        return cls(
            density=_parse_int(env, "PAGE_RASTER_DENSITY", defaults.density),
            deadline=_parse_float(env, "PAGE_RASTER_DEADLINE", defaults.deadline),
            restricted=_parse_bool(env.get(RESTRICTED_ENV_VAR)),
            temp_dir=Path(temp_dir) if temp_dir else defaults.temp_dir,
            stale_age_hours=_parse_float(env, "PAGE_RASTER_STALE_HOURS", defaults.stale_age_hours),
        )


__all__ = ["RasterSettings", "detect_restricted_environment", "default_temp_dir"]
