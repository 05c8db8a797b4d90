"""
Custom exceptions for page-raster.

Only document-level failures escape a conversion. Renderer failures are
recovered inside the cascade and never reach the caller.
"""


class PageRasterError(Exception):
    """Base exception for all page-raster errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown page rasterization error occurred."


class MalformedDocumentError(PageRasterError):
    """Raised when the page count or an individual page cannot be read."""

    @property
    def default_message(self) -> str:
        return "Malformed or unreadable document."


class EncryptedDocumentError(MalformedDocumentError):
    """Raised when the document is encrypted and cannot be opened."""

    @property
    def default_message(self) -> str:
        return "Document is encrypted and cannot be processed without a password."


class UnsupportedFileTypeError(PageRasterError):
    """Raised when an upload is neither a PDF nor a supported image."""

    @property
    def default_message(self) -> str:
        return "Unsupported file type. Please upload PDF or image files."


class RendererFailure(PageRasterError):
    """Base class for a failed rasterization attempt."""

    def __init__(self, message: str = "", *, renderer: str = "") -> None:
        super().__init__(message)
        self.renderer = renderer

    @property
    def default_message(self) -> str:
        return "Rasterization attempt failed."


class RendererUnavailableError(RendererFailure):
    """Raised when the backend binary is not installed."""

    @property
    def default_message(self) -> str:
        return "Rasterization backend is not available."


class RendererError(RendererFailure):
    """Raised when the backend ran but produced no usable image."""

    @property
    def default_message(self) -> str:
        return "Rasterization backend failed."


class RendererTimeoutError(RendererFailure):
    """Raised by the cascade when an attempt exceeds its deadline."""

    @property
    def default_message(self) -> str:
        return "Rasterization attempt exceeded its deadline."
