"""
Type definitions and dataclasses for page-raster.

This module defines the data structures passed between the splitter, the
renderer cascade and the caller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

JPEG_MIME_TYPE = "image/jpeg"
PLACEHOLDER_SOURCE = "placeholder"


@dataclass(frozen=True)
class PageGeometry:
    """Media box size of a source page in PDF points."""

    width: float
    height: float

    def __str__(self) -> str:
        return f"{round(self.width)} x {round(self.height)} pt"


@dataclass
class SourcePage:
    """
    A single-page document extracted from the source.

    Attributes:
        page_number: 1-indexed position in the source document
        data: Bytes of a document containing only this page
        geometry: Media box size when it could be read
    """
    page_number: int
    data: bytes
    geometry: Optional[PageGeometry] = None


@dataclass
class PageFile:
    """
    One rasterized page handed to the caller.

    Attributes:
        page_number: 1-indexed page number, contiguous within one conversion
        file_name: Name derived from the source name and page number
        buffer: Image bytes, ``None`` once released
        mime_type: Declared image format of ``buffer``
        source: Renderer that produced the image, or ``"placeholder"``
    """
    page_number: int
    file_name: str
    buffer: Optional[bytes]
    mime_type: str = JPEG_MIME_TYPE
    source: str = ""

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValueError("page_number must be >= 1")

    @property
    def released(self) -> bool:
        return self.buffer is None

    @property
    def size(self) -> int:
        return len(self.buffer) if self.buffer is not None else 0

    @property
    def is_placeholder(self) -> bool:
        return self.source == PLACEHOLDER_SOURCE

    def release(self) -> None:
        """Drop the image bytes once the caller no longer needs them."""
        self.buffer = None

    def __str__(self) -> str:
        return f"PageFile(page={self.page_number}, file='{self.file_name}', bytes={self.size})"


class RenderStatus(str, Enum):
    """Outcome of a single rasterization attempt."""

    SUCCESS = "success"
    UNAVAILABLE = "unavailable"
    ERROR = "error"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class RenderAttempt:
    """
    Record of one renderer tried for one page.

    Attributes:
        renderer: Name of the renderer variant
        page_number: Page the attempt was made for
        status: Outcome classification
        elapsed: Seconds the cascade waited for the attempt
        detail: Failure message, empty on success
    """
    renderer: str
    page_number: int
    status: RenderStatus
    elapsed: float = 0.0
    detail: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is RenderStatus.SUCCESS


@dataclass
class PageRender:
    """Image produced for one page together with the attempts behind it."""

    data: bytes
    source: str
    attempts: List[RenderAttempt] = field(default_factory=list)
