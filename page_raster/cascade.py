"""Renderer selection, deadlines and the placeholder fallback."""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import List, Optional, Sequence, Tuple

from .config import RasterSettings
from .exceptions import RendererError, RendererFailure, RendererTimeoutError, RendererUnavailableError
from .optimizer import ImageOptimizer
from .placeholder import PlaceholderGenerator
from .renderers import RasterRenderer, default_renderers
from .types import PLACEHOLDER_SOURCE, PageRender, RenderAttempt, RenderStatus, SourcePage

LOGGER = logging.getLogger("page_raster.cascade")

Candidate = Tuple[RasterRenderer, Optional[float]]


def _status_for(exc: Exception) -> RenderStatus:
    if isinstance(exc, RendererUnavailableError):
        return RenderStatus.UNAVAILABLE
    if isinstance(exc, RendererTimeoutError):
        return RenderStatus.TIMEOUT
    return RenderStatus.ERROR


class RendererCascade:
    """Try renderers in a fixed order, falling back to a placeholder.

    Unrestricted hosts try every renderer without a deadline. Restricted hosts
    skip the primary renderer and give the secondary one a single deadline-bound
    attempt, so the worst case per page is the deadline plus placeholder time.
    """

    def __init__(
        self,
        renderers: Sequence[RasterRenderer] | None = None,
        *,
        settings: RasterSettings | None = None,
        placeholder: PlaceholderGenerator | None = None,
        optimizer: ImageOptimizer | None = None,
    ) -> None:
        self.settings = settings or RasterSettings()
        self.renderers: List[RasterRenderer] = (
            list(renderers) if renderers is not None else default_renderers(self.settings)
        )
        self.placeholder = placeholder or PlaceholderGenerator(self.settings)
        self.optimizer = optimizer or ImageOptimizer(self.settings)

    def candidates(self, restricted: bool) -> List[Candidate]:
        if not restricted:
            return [(renderer, None) for renderer in self.renderers]
        # The primary backend is assumed missing on restricted hosts.
        return [(renderer, self.settings.deadline) for renderer in self.renderers[1:2]]

    def attempt(self, renderer: RasterRenderer, page: SourcePage, deadline: float | None) -> bytes:
        """Run one renderer, raising :class:`RendererFailure` on any failure."""

        if deadline is None:
            try:
                return renderer.render(page.data, page.page_number)
            except RendererFailure:
                raise
            except Exception as exc:
                raise RendererError(str(exc), renderer=renderer.name) from exc

        outcome: "queue.Queue[Tuple[bool, object]]" = queue.Queue(maxsize=1)

        def _run() -> None:
            try:
                outcome.put((True, renderer.render(page.data, page.page_number)))
            except Exception as exc:
                outcome.put((False, exc))

        # Abandon, don't kill: the subprocess may outlive the deadline, but a
        # daemon worker never keeps the interpreter from exiting.
        worker = threading.Thread(target=_run, name=f"render-{renderer.name}", daemon=True)
        worker.start()
        try:
            succeeded, value = outcome.get(timeout=deadline)
        except queue.Empty as exc:
            raise RendererTimeoutError(
                f"{renderer.name} did not finish within {deadline}s", renderer=renderer.name
            ) from exc

        if succeeded:
            return value  # type: ignore[return-value]
        if isinstance(value, RendererFailure):
            raise value
        raise RendererError(str(value), renderer=renderer.name) from value  # type: ignore[misc]

    def render_page(self, page: SourcePage, *, restricted: bool = False) -> PageRender:
        attempts: List[RenderAttempt] = []
        image: bytes | None = None
        source = PLACEHOLDER_SOURCE

        for renderer, deadline in self.candidates(restricted):
            started = time.monotonic()
            try:
                image = self.attempt(renderer, page, deadline)
            except RendererFailure as exc:
                record = RenderAttempt(
                    renderer=renderer.name,
                    page_number=page.page_number,
                    status=_status_for(exc),
                    elapsed=time.monotonic() - started,
                    detail=str(exc),
                )
                attempts.append(record)
                LOGGER.warning(
                    "Renderer %s failed for page %s (%s): %s",
                    renderer.name,
                    page.page_number,
                    record.status.value,
                    exc,
                )
                continue

            attempts.append(
                RenderAttempt(
                    renderer=renderer.name,
                    page_number=page.page_number,
                    status=RenderStatus.SUCCESS,
                    elapsed=time.monotonic() - started,
                )
            )
            source = renderer.name
            LOGGER.debug(
                "Page %s rendered by %s after %s failed attempts",
                page.page_number,
                renderer.name,
                sum(1 for record in attempts if not record.succeeded),
            )
            break

        if image is None:
            LOGGER.warning("All renderers failed for page %s, using placeholder", page.page_number)
            image = self.placeholder.generate(page.page_number, page.geometry, len(page.data))

        return PageRender(data=self.optimizer.optimize(image), source=source, attempts=attempts)


__all__ = ["RendererCascade", "Candidate"]
