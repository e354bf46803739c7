"""
Uploads component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from folio.core.ports.images import DEFAULT_MAX_HEIGHT, DEFAULT_MAX_WIDTH, DEFAULT_QUALITY

# --- Validation Error ---


@dataclass(frozen=True)
class UploadValidationError:
    """Upload validation error with actionable message."""

    code: str
    message: str
    field: str = "file"


# --- Configuration ---


@dataclass(frozen=True)
class UploadPolicy:
    """Limits applied before an image is preprocessed and stored."""

    max_bytes: int = 5 * 1024 * 1024
    allowed_types: tuple[str, ...] = ("image/png", "image/jpeg", "image/jpg", "image/webp")
    max_width: int = DEFAULT_MAX_WIDTH
    max_height: int = DEFAULT_MAX_HEIGHT
    quality: float = DEFAULT_QUALITY


# --- Input Models ---


@dataclass(frozen=True)
class UploadImageInput:
    """
    One image picked in an admin form.

    `prefix` names the slot ("main", "gallery", "avatar"); `sequence`
    distinguishes several files uploaded in the same batch.
    """

    data: bytes
    content_type: str
    bucket: str
    filename: str | None = None
    prefix: str = "main"
    sequence: int | None = None


# --- Output Models ---


@dataclass(frozen=True)
class UploadOutput:
    """Output from an image upload."""

    success: bool
    public_url: str | None = None
    path: str | None = None
    size_bytes: int = 0
    errors: list[UploadValidationError] = field(default_factory=list)
    error: str | None = None
