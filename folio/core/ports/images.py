"""
Image Preprocessor Interface.

Resizes and recompresses an uploaded image so that it fits inside a
bounding box, keeping the aspect ratio and the original encoding
format. Decoding and encoding may be slow, so implementations must
not block the event loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

DEFAULT_MAX_WIDTH = 1200
DEFAULT_MAX_HEIGHT = 1200
DEFAULT_QUALITY = 0.8


@dataclass(frozen=True)
class ProcessedImage:
    """Re-encoded image bytes with their final geometry."""

    data: bytes
    content_type: str
    image_format: str
    width: int
    height: int

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class ImageOptimizerPort(Protocol):
    async def optimize(
        self,
        data: bytes,
        *,
        max_width: int = DEFAULT_MAX_WIDTH,
        max_height: int = DEFAULT_MAX_HEIGHT,
        quality: float = DEFAULT_QUALITY,
    ) -> ProcessedImage:
        """
        Shrink `data` to fit max_width x max_height.

        Raises:
            ImageProcessingError: If the bytes cannot be decoded or re-encoded
        """
        ...


def fit_within(
    width: int, height: int, max_width: int, max_height: int
) -> tuple[int, int]:
    """
    Target dimensions for a width x height image.

    Scales uniformly so both sides fit the box. Images already inside
    the box keep their size.
    """
    if width <= 0 or height <= 0:
        raise ValueError("image dimensions must be positive")

    scale = min(max_width / width, max_height / height, 1.0)
    return max(1, round(width * scale)), max(1, round(height * scale))


# --- Error Types ---


class ImageProcessingError(Exception):
    """The image could not be decoded or re-encoded."""
