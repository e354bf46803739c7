"""
Pillow image optimizer.

Decodes, downsizes and re-encodes in a worker thread so the event
loop keeps serving while large photos are processed. The output keeps
the input's format; `quality` applies to the lossy formats only.
"""

from __future__ import annotations

import asyncio
import io
import logging

from PIL import Image, UnidentifiedImageError

from folio.core.ports.images import (
    DEFAULT_MAX_HEIGHT,
    DEFAULT_MAX_WIDTH,
    DEFAULT_QUALITY,
    ImageProcessingError,
    ProcessedImage,
    fit_within,
)

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}
LOSSY_FORMATS = frozenset({"JPEG", "WEBP"})


def optimize_bytes(
    data: bytes,
    *,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT,
    quality: float = DEFAULT_QUALITY,
) -> ProcessedImage:
    """Blocking resize + re-encode."""
    if not 0 < quality <= 1:
        raise ImageProcessingError(f"quality must be in (0, 1], got {quality}")

    try:
        with Image.open(io.BytesIO(data)) as img:
            image_format = (img.format or "").upper()
            if image_format not in CONTENT_TYPES:
                raise ImageProcessingError(f"Unsupported image format '{img.format}'")

            source_width, source_height = img.size
            width, height = fit_within(source_width, source_height, max_width, max_height)
            out = img
            if (width, height) != img.size:
                out = img.resize((width, height), Image.Resampling.LANCZOS)
            if image_format == "JPEG" and out.mode not in ("RGB", "L"):
                out = out.convert("RGB")

            params: dict[str, int | bool] = {}
            if image_format in LOSSY_FORMATS:
                params["quality"] = max(1, round(quality * 100))
            else:
                params["optimize"] = True

            buf = io.BytesIO()
            out.save(buf, format=image_format, **params)
    except UnidentifiedImageError as exc:
        raise ImageProcessingError("Unable to decode image") from exc
    except OSError as exc:
        raise ImageProcessingError(f"Unable to re-encode image: {exc}") from exc
    except (Image.DecompressionBombError, ValueError) as exc:
        raise ImageProcessingError(f"Image too large to process: {exc}") from exc

    encoded = buf.getvalue()
    logger.debug(
        "Optimized %s image %dx%d -> %dx%d (%d -> %d bytes)",
        image_format, source_width, source_height, width, height, len(data), len(encoded),
    )
    return ProcessedImage(
        data=encoded,
        content_type=CONTENT_TYPES[image_format],
        image_format=image_format,
        width=width,
        height=height,
    )


class PillowImageOptimizer:
    """ImageOptimizerPort backed by Pillow."""

    async def optimize(
        self,
        data: bytes,
        *,
        max_width: int = DEFAULT_MAX_WIDTH,
        max_height: int = DEFAULT_MAX_HEIGHT,
        quality: float = DEFAULT_QUALITY,
    ) -> ProcessedImage:
        return await asyncio.to_thread(
            optimize_bytes,
            data,
            max_width=max_width,
            max_height=max_height,
            quality=quality,
        )
