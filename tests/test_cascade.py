from __future__ import annotations

import os
import subprocess
import sys
import textwrap
import threading
import time
from pathlib import Path

import pytest

from page_raster.cascade import RendererCascade
from page_raster.config import RasterSettings
from page_raster.imaging import IMAGING_UNAVAILABLE
from page_raster.placeholder import PlaceholderGenerator
from page_raster.renderers import JPEG_SOI
from page_raster.types import PLACEHOLDER_SOURCE, PageGeometry, RenderStatus, SourcePage


def _page(number: int = 1) -> SourcePage:
    return SourcePage(page_number=number, data=b"%PDF-1.4 page", geometry=PageGeometry(612, 792))


def test_unrestricted_candidates_keep_priority_without_deadline(renderer_factory, settings) -> None:
    renderers = [renderer_factory("a"), renderer_factory("b"), renderer_factory("c")]
    cascade = RendererCascade(renderers, settings=settings)

    candidates = cascade.candidates(restricted=False)

    assert [(renderer.name, deadline) for renderer, deadline in candidates] == [
        ("a", None),
        ("b", None),
        ("c", None),
    ]


def test_restricted_candidates_only_secondary_with_deadline(renderer_factory, settings) -> None:
    renderers = [renderer_factory("a"), renderer_factory("b"), renderer_factory("c")]
    cascade = RendererCascade(renderers, settings=settings)

    candidates = cascade.candidates(restricted=True)

    assert [(renderer.name, deadline) for renderer, deadline in candidates] == [("b", settings.deadline)]


def test_restricted_with_single_renderer_has_no_candidates(renderer_factory, settings) -> None:
    cascade = RendererCascade([renderer_factory("a")], settings=settings)

    assert cascade.candidates(restricted=True) == []


def test_first_success_wins(renderer_factory, settings) -> None:
    calls: list = []
    renderers = [
        renderer_factory("a", default="unavailable", calls=calls),
        renderer_factory("b", calls=calls),
        renderer_factory("c", calls=calls),
    ]
    cascade = RendererCascade(renderers, settings=settings)

    result = cascade.render_page(_page())

    assert result.source == "b"
    assert result.data.startswith(JPEG_SOI)
    assert calls == [("a", 1), ("b", 1)]
    assert [attempt.status for attempt in result.attempts] == [
        RenderStatus.UNAVAILABLE,
        RenderStatus.SUCCESS,
    ]
    assert [attempt.succeeded for attempt in result.attempts] == [False, True]


def test_all_failures_fall_back_to_placeholder(renderer_factory, settings) -> None:
    renderers = [
        renderer_factory("a", default="unavailable"),
        renderer_factory("b", default="error"),
        renderer_factory("c", default="crash"),
    ]
    cascade = RendererCascade(renderers, settings=settings)

    result = cascade.render_page(_page(4))

    assert result.source == PLACEHOLDER_SOURCE
    assert result.data.startswith(JPEG_SOI)
    assert [attempt.status for attempt in result.attempts] == [
        RenderStatus.UNAVAILABLE,
        RenderStatus.ERROR,
        RenderStatus.ERROR,
    ]
    assert all(attempt.page_number == 4 for attempt in result.attempts)


def test_page_failure_does_not_reorder_renderers(renderer_factory, settings) -> None:
    calls: list = []
    renderers = [
        renderer_factory("a", {1: "ok", 2: "error"}, calls=calls),
        renderer_factory("b", default="error", calls=calls),
    ]
    cascade = RendererCascade(renderers, settings=settings)

    first = cascade.render_page(_page(1))
    second = cascade.render_page(_page(2))
    third = cascade.render_page(_page(3))

    assert first.source == "a"
    assert second.source == PLACEHOLDER_SOURCE
    assert third.source == "a"
    assert calls == [("a", 1), ("a", 2), ("b", 2), ("a", 3)]


def test_restricted_mode_skips_primary_and_stops_after_secondary(renderer_factory, settings) -> None:
    calls: list = []
    renderers = [
        renderer_factory("a", calls=calls),
        renderer_factory("b", default="error", calls=calls),
        renderer_factory("c", calls=calls),
    ]
    cascade = RendererCascade(renderers, settings=settings)

    result = cascade.render_page(_page(), restricted=True)

    assert result.source == PLACEHOLDER_SOURCE
    assert calls == [("b", 1)]


def test_restricted_success_within_deadline(renderer_factory, settings) -> None:
    cascade = RendererCascade([renderer_factory("a"), renderer_factory("b")], settings=settings)

    result = cascade.render_page(_page(), restricted=True)

    assert result.source == "b"
    assert result.attempts[0].status is RenderStatus.SUCCESS


def test_restricted_attempt_is_abandoned_at_deadline(renderer_factory, work_dir) -> None:
    settings = RasterSettings(temp_dir=work_dir, deadline=0.3)
    release = threading.Event()
    renderers = [renderer_factory("a"), renderer_factory("b", default=release, settings=settings)]
    cascade = RendererCascade(
        renderers,
        settings=settings,
        placeholder=PlaceholderGenerator(settings, imaging=IMAGING_UNAVAILABLE),
    )

    try:
        started = time.monotonic()
        result = cascade.render_page(_page(), restricted=True)
        elapsed = time.monotonic() - started
    finally:
        release.set()

    assert elapsed < settings.deadline + 0.5
    assert result.source == PLACEHOLDER_SOURCE
    assert result.attempts[0].status is RenderStatus.TIMEOUT
    assert result.attempts[0].elapsed == pytest.approx(settings.deadline, abs=0.25)


def test_unrestricted_mode_has_no_deadline(renderer_factory, work_dir) -> None:
    settings = RasterSettings(temp_dir=work_dir, deadline=0.1)
    release = threading.Event()
    timer = threading.Timer(0.4, release.set)
    cascade = RendererCascade([renderer_factory("a", default=release, settings=settings)], settings=settings)

    timer.start()
    try:
        result = cascade.render_page(_page())
    finally:
        timer.cancel()

    assert result.source == "a"


def test_placeholder_receives_page_details(renderer_factory, settings) -> None:
    received: list = []

    class RecordingPlaceholder(PlaceholderGenerator):
        def generate(self, page_number, geometry=None, source_size=0):
            received.append((page_number, geometry, source_size))
            return super().generate(page_number, geometry, source_size)

    page = _page(2)
    cascade = RendererCascade(
        [renderer_factory("a", default="error")],
        settings=settings,
        placeholder=RecordingPlaceholder(settings),
    )

    cascade.render_page(page)

    assert received == [(2, PageGeometry(612, 792), len(page.data))]


HUNG_BACKEND_SCRIPT = textwrap.dedent(
    """
    import sys
    import time

    from page_raster.cascade import RendererCascade
    from page_raster.config import RasterSettings
    from page_raster.imaging import IMAGING_UNAVAILABLE
    from page_raster.placeholder import PlaceholderGenerator
    from page_raster.renderers import RasterRenderer
    from page_raster.types import SourcePage


    class HungRenderer(RasterRenderer):
        executables = ("hung",)

        def __init__(self, name, settings):
            super().__init__(settings, executable="hung")
            self.name = name

        def build_command(self, executable, source, output):
            return [executable]

        def render(self, data, page_number):
            time.sleep(6)
            return b"\\xff\\xd8"


    settings = RasterSettings(temp_dir=sys.argv[1], deadline=0.3)
    cascade = RendererCascade(
        [HungRenderer("a", settings), HungRenderer("b", settings)],
        settings=settings,
        placeholder=PlaceholderGenerator(settings, imaging=IMAGING_UNAVAILABLE),
    )
    result = cascade.render_page(SourcePage(page_number=1, data=b"%PDF"), restricted=True)
    print(result.attempts[0].status.value)
    """
)


def test_abandoned_attempt_does_not_delay_interpreter_exit(tmp_path: Path) -> None:
    project_root = Path(__file__).resolve().parents[1]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(project_root), env.get("PYTHONPATH")]))

    started = time.monotonic()
    completed = subprocess.run(
        [sys.executable, "-c", HUNG_BACKEND_SCRIPT, str(tmp_path / "raster-tmp")],
        capture_output=True,
        env=env,
        timeout=30,
    )
    elapsed = time.monotonic() - started

    assert completed.returncode == 0, completed.stderr.decode()
    assert completed.stdout.decode().strip() == "timeout"
    assert elapsed < 4.0
