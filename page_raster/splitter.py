"""Split a source PDF into independent single-page documents."""

from __future__ import annotations

import io
import logging
from typing import List, Optional

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from .exceptions import EncryptedDocumentError, MalformedDocumentError
from .types import PageGeometry, SourcePage

LOGGER = logging.getLogger("page_raster.splitter")


class DocumentSplitter:
    """Split PDF bytes into one document per page, in source order."""

    def __init__(self, *, password: Optional[str] = None) -> None:
        self.password = password

    def _open(self, data: bytes) -> PdfReader:
        if not data:
            raise MalformedDocumentError("Document is empty.")

        try:
            reader = PdfReader(io.BytesIO(data))
            encrypted = reader.is_encrypted
        except PdfReadError as exc:
            raise MalformedDocumentError(f"Corrupted or invalid PDF. Error: {exc}") from exc
        except Exception as exc:
            raise MalformedDocumentError(f"Unexpected error reading PDF. Error: {exc}") from exc

        if encrypted:
            if not self.password:
                raise EncryptedDocumentError("PDF is encrypted. Supply a password to process this file.")
            try:
                decrypted = reader.decrypt(self.password)
            except Exception as exc:
                raise EncryptedDocumentError(f"Failed to decrypt PDF. Error: {exc}") from exc
            if decrypted == 0:
                raise EncryptedDocumentError("Failed to decrypt PDF with supplied password.")

        return reader

    @staticmethod
    def _count(reader: PdfReader) -> int:
        try:
            num_pages = len(reader.pages)
        except Exception as exc:
            raise MalformedDocumentError(f"Unable to determine page count. Error: {exc}") from exc
        if num_pages == 0:
            raise MalformedDocumentError("PDF has no pages.")
        return num_pages

    @staticmethod
    def _geometry(page: object) -> Optional[PageGeometry]:
        try:
            box = page.mediabox  # type: ignore[attr-defined]
            return PageGeometry(width=float(box.width), height=float(box.height))
        except Exception:
            return None

    def page_count(self, data: bytes) -> int:
        return self._count(self._open(data))

    def split_pages(self, data: bytes) -> List[SourcePage]:
        reader = self._open(data)
        num_pages = self._count(reader)
        LOGGER.info("Splitting document with %s pages", num_pages)

        if num_pages == 1 and not reader.is_encrypted:
            return [SourcePage(page_number=1, data=data, geometry=self._geometry(reader.pages[0]))]

        pages: List[SourcePage] = []
        for index in range(num_pages):
            try:
                page = reader.pages[index]
                writer = PdfWriter()
                writer.add_page(page)
                output = io.BytesIO()
                writer.write(output)
            except Exception as exc:
                raise MalformedDocumentError(
                    f"Unable to extract page {index + 1}. Error: {exc}"
                ) from exc

            pages.append(
                SourcePage(page_number=index + 1, data=output.getvalue(), geometry=self._geometry(page))
            )
            LOGGER.debug("Created single-page PDF for page %s", index + 1)

        return pages

    def split(self, data: bytes) -> List[bytes]:
        """Return one single-page document per source page.

        A one-page source is returned unchanged.
        """

        return [page.data for page in self.split_pages(data)]


__all__ = ["DocumentSplitter"]
