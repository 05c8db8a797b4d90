"""
page-raster - Turn uploaded documents into per-page JPEG images.

The pipeline splits a PDF into single-page documents, rasterizes each page
with the first external backend that works (Poppler, Ghostscript,
ImageMagick), substitutes a synthetic placeholder when none does, and
normalizes every image before handing it to the caller.

Quick Start:
    >>> from page_raster import PageRasterizer
    >>> rasterizer = PageRasterizer()
    >>> with rasterizer.open_pages(pdf_bytes, "invoice.pdf") as pages:
    ...     for page in pages:
    ...         upload(page.file_name, page.buffer)

Main Classes:
    - PageRasterizer: End-to-end conversion entry point
    - DocumentSplitter: Split a PDF into single-page documents
    - RendererCascade: Renderer ordering, deadlines and fallback
    - PlaceholderGenerator: Synthetic page images
    - ImageOptimizer: Resize and recompress page images
    - ResourceJanitor: Temp file and buffer cleanup

Exceptions:
    - PageRasterError: Base exception
    - MalformedDocumentError: Unreadable document, aborts the conversion
    - EncryptedDocumentError: Encrypted document without a valid password
    - UnsupportedFileTypeError: Upload is neither PDF nor image

For CLI usage, use the 'page-raster' command after installation.
"""

from page_raster.cascade import RendererCascade
from page_raster.config import RasterSettings, detect_restricted_environment
from page_raster.exceptions import (
    EncryptedDocumentError,
    MalformedDocumentError,
    PageRasterError,
    RendererError,
    RendererFailure,
    RendererTimeoutError,
    RendererUnavailableError,
    UnsupportedFileTypeError,
)
from page_raster.imaging import IMAGING_UNAVAILABLE, load_imaging
from page_raster.janitor import ResourceJanitor
from page_raster.optimizer import ImageOptimizer
from page_raster.pipeline import PageRasterizer, split_pdf_into_pages
from page_raster.placeholder import PlaceholderGenerator
from page_raster.renderers import (
    GhostscriptRenderer,
    ImageMagickRenderer,
    PopplerRenderer,
    RasterRenderer,
    default_renderers,
)
from page_raster.splitter import DocumentSplitter
from page_raster.types import PageFile, PageGeometry, RenderAttempt, RenderStatus, SourcePage

__version__ = "1.0.0"

__all__ = [
    # Pipeline
    "PageRasterizer",
    "split_pdf_into_pages",
    "DocumentSplitter",
    "RendererCascade",
    "PlaceholderGenerator",
    "ImageOptimizer",
    "ResourceJanitor",
    # Renderers
    "RasterRenderer",
    "PopplerRenderer",
    "GhostscriptRenderer",
    "ImageMagickRenderer",
    "default_renderers",
    # Configuration
    "RasterSettings",
    "detect_restricted_environment",
    "load_imaging",
    "IMAGING_UNAVAILABLE",
    # Data types
    "PageFile",
    "PageGeometry",
    "SourcePage",
    "RenderAttempt",
    "RenderStatus",
    # Exceptions
    "PageRasterError",
    "MalformedDocumentError",
    "EncryptedDocumentError",
    "UnsupportedFileTypeError",
    "RendererFailure",
    "RendererUnavailableError",
    "RendererError",
    "RendererTimeoutError",
    # Version info
    "__version__",
]
