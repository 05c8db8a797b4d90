from __future__ import annotations

import io
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple
import sys

import pytest
from PIL import Image
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from page_raster.config import RasterSettings  # noqa: E402
from page_raster.exceptions import RendererError, RendererUnavailableError  # noqa: E402
from page_raster.renderers import RasterRenderer  # noqa: E402


def make_pdf(num_pages: int, width: float = 200, height: float = 300) -> bytes:
    writer = PdfWriter()
    for _ in range(num_pages):
        writer.add_blank_page(width=width, height=height)
    writer.add_metadata({"/Producer": "page-raster-tests", "/Title": "Sample"})
    stream = io.BytesIO()
    writer.write(stream)
    return stream.getvalue()


def make_jpeg(width: int = 120, height: int = 160, color: str = "white") -> bytes:
    stream = io.BytesIO()
    Image.new("RGB", (width, height), color).save(stream, format="JPEG")
    return stream.getvalue()


class FakeRenderer(RasterRenderer):
    """Renderer double driven by a per-page outcome table.

    Outcomes: ``"ok"``, ``"error"``, ``"unavailable"``, ``"crash"`` or a
    :class:`threading.Event` to block on before succeeding.
    """

    executables = ("fake-renderer",)

    def __init__(
        self,
        name: str,
        outcomes: Optional[Dict[int, object]] = None,
        *,
        default: object = "ok",
        calls: Optional[List[Tuple[str, int]]] = None,
        settings: Optional[RasterSettings] = None,
    ) -> None:
        super().__init__(settings, executable="fake-renderer")
        self.name = name
        self.outcomes = outcomes or {}
        self.default = default
        self.calls = calls if calls is not None else []

    def build_command(self, executable: str, source: Path, output: Path) -> list[str]:
        return [executable, str(source), str(output)]

    def render(self, data: bytes, page_number: int) -> bytes:
        self.calls.append((self.name, page_number))
        outcome = self.outcomes.get(page_number, self.default)
        if isinstance(outcome, threading.Event):
            outcome.wait(timeout=10)
            return make_jpeg()
        if outcome == "ok":
            return make_jpeg()
        if outcome == "unavailable":
            raise RendererUnavailableError(f"{self.name} missing", renderer=self.name)
        if outcome == "crash":
            raise ValueError("unexpected backend crash")
        raise RendererError(f"{self.name} failed", renderer=self.name)


@pytest.fixture()
def pdf_factory() -> Callable[..., bytes]:
    return make_pdf


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    return make_pdf(3)


@pytest.fixture()
def single_page_pdf_bytes() -> bytes:
    return make_pdf(1)


@pytest.fixture()
def jpeg_bytes() -> bytes:
    return make_jpeg()


@pytest.fixture()
def work_dir(tmp_path: Path) -> Path:
    return tmp_path / "raster-tmp"


@pytest.fixture()
def settings(work_dir: Path) -> RasterSettings:
    return RasterSettings(temp_dir=work_dir, deadline=0.5, restricted=False)


@pytest.fixture()
def renderer_factory(settings: RasterSettings) -> Callable[..., FakeRenderer]:
    def _create(name: str, outcomes: Optional[Dict[int, object]] = None, **kwargs) -> FakeRenderer:
        kwargs.setdefault("settings", settings)
        return FakeRenderer(name, outcomes, **kwargs)

    return _create
