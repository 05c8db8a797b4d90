"""Top-level conversion of uploaded documents into page images."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from .cascade import RendererCascade
from .config import RasterSettings
from .exceptions import UnsupportedFileTypeError
from .janitor import ResourceJanitor
from .splitter import DocumentSplitter
from .types import JPEG_MIME_TYPE, PageFile
from .utils import file_stem

LOGGER = logging.getLogger("page_raster.pipeline")

PDF_MIME_TYPE = "application/pdf"

MIME_TYPES = {
    ".pdf": PDF_MIME_TYPE,
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
    ".webp": "image/webp",
}


def mime_type_for(file_name: str) -> str:
    return MIME_TYPES.get(Path(file_name).suffix.lower(), "application/octet-stream")


def is_image_file(file_name: str) -> bool:
    return mime_type_for(file_name).startswith("image/")


def page_file_name(source_name: str, page_number: int, extension: str = ".jpg") -> str:
    return f"{file_stem(source_name)}_page_{page_number}{extension}"


class PageRasterizer:
    """Convert a document into one :class:`PageFile` per page.

    Pages are processed one at a time in source order. Only a malformed
    document raises; every page that fails to render gets a placeholder.
    """

    def __init__(
        self,
        settings: Optional[RasterSettings] = None,
        *,
        splitter: Optional[DocumentSplitter] = None,
        cascade: Optional[RendererCascade] = None,
        janitor: Optional[ResourceJanitor] = None,
    ) -> None:
        self.settings = settings or RasterSettings.from_env()
        self.splitter = splitter or DocumentSplitter()
        self.cascade = cascade or RendererCascade(settings=self.settings)
        self.janitor = janitor or ResourceJanitor(
            self.settings.temp_dir, stale_age_hours=self.settings.stale_age_hours
        )

    def convert(self, data: bytes, file_name: str) -> List[PageFile]:
        restricted = self.settings.is_restricted()
        source_pages = self.splitter.split_pages(data)
        LOGGER.info(
            "Processing %s with %s pages (%s environment)",
            file_name,
            len(source_pages),
            "restricted" if restricted else "unrestricted",
        )

        pages: List[PageFile] = []
        for source_page in source_pages:
            rendered = self.cascade.render_page(source_page, restricted=restricted)
            pages.append(
                PageFile(
                    page_number=source_page.page_number,
                    file_name=page_file_name(file_name, source_page.page_number),
                    buffer=rendered.data,
                    mime_type=JPEG_MIME_TYPE,
                    source=rendered.source,
                )
            )
            LOGGER.info(
                "Page %s/%s done via %s, %s bytes",
                source_page.page_number,
                len(source_pages),
                rendered.source,
                len(rendered.data),
            )

        return pages

    @contextmanager
    def open_pages(self, data: bytes, file_name: str) -> Iterator[List[PageFile]]:
        """Yield converted pages and always clean up afterwards."""

        pages: List[PageFile] = []
        try:
            pages = self.convert(data, file_name)
            yield pages
        finally:
            self.janitor.full_cleanup(pages)

    def split_file_into_pages(
        self,
        data: bytes,
        file_name: str,
        mime_type: Optional[str] = None,
    ) -> List[PageFile]:
        """Dispatch an upload: PDFs are rasterized, images pass through."""

        declared = mime_type or mime_type_for(file_name)
        if declared == PDF_MIME_TYPE or file_name.lower().endswith(".pdf"):
            return self.convert(data, file_name)

        if declared.startswith("image/") or is_image_file(file_name):
            image_type = declared if declared.startswith("image/") else mime_type_for(file_name)
            return [
                PageFile(
                    page_number=1,
                    file_name=page_file_name(file_name, 1, Path(file_name).suffix),
                    buffer=data,
                    mime_type=image_type,
                    source="original",
                )
            ]

        raise UnsupportedFileTypeError(
            f"Unsupported file type: {declared}. Please upload PDF or image files."
        )


def split_pdf_into_pages(
    data: bytes,
    file_name: str,
    settings: Optional[RasterSettings] = None,
) -> List[PageFile]:
    """Convenience wrapper around :meth:`PageRasterizer.convert`."""

    return PageRasterizer(settings).convert(data, file_name)


__all__ = [
    "PageRasterizer",
    "split_pdf_into_pages",
    "mime_type_for",
    "is_image_file",
    "page_file_name",
]
