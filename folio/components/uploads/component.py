"""
Uploads component - validate, shrink and store admin images.

Pipeline: type/size checks -> image preprocessor -> bucket upload.
The public URL is only handed back after the storage write succeeds,
so a failed upload never leaks into a form field.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath

from folio.core.ports.feedback import FeedbackPort
from folio.core.ports.images import ImageOptimizerPort, ImageProcessingError
from folio.core.ports.remote import RemoteError
from folio.core.ports.time import TimePort, epoch_millis

from .models import UploadImageInput, UploadOutput, UploadPolicy, UploadValidationError
from .ports import StoragePort

logger = logging.getLogger(__name__)

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


# --- Helper Functions ---


def mime_to_extension(mime_type: str) -> str:
    return EXTENSIONS.get(mime_type, "bin")


def build_filename(
    prefix: str,
    millis: int,
    extension: str,
    sequence: int | None = None,
) -> str:
    """
    Storage object name for an upload.

    Format: {prefix}-{epoch_ms}.{ext} or {prefix}-{epoch_ms}-{n}.{ext}
    """
    stem = f"{prefix}-{millis}" if sequence is None else f"{prefix}-{millis}-{sequence}"
    return f"{stem}.{extension.lower().lstrip('.')}"


def pick_extension(filename: str | None, content_type: str) -> str:
    """Keep the picked file's extension; fall back to the MIME type."""
    if filename:
        suffix = PurePosixPath(filename).suffix
        if suffix:
            return suffix[1:].lower()
    return mime_to_extension(content_type)


# --- Validation Functions ---


def validate_upload(
    data: bytes,
    content_type: str,
    policy: UploadPolicy,
) -> list[UploadValidationError]:
    """
    Check an image against the upload policy.

    Returns list of errors (empty if valid).
    """
    errors: list[UploadValidationError] = []

    if content_type not in policy.allowed_types:
        errors.append(
            UploadValidationError(
                code="invalid_mime_type",
                message=(
                    f"MIME type '{content_type}' is not allowed. "
                    f"Allowed types: {', '.join(sorted(set(policy.allowed_types)))}"
                ),
                field="content_type",
            )
        )

    if not data:
        errors.append(UploadValidationError(code="empty_file", message="File is empty"))
    elif len(data) > policy.max_bytes:
        errors.append(
            UploadValidationError(
                code="file_too_large",
                message=(
                    f"File size {len(data)} bytes exceeds maximum of {policy.max_bytes} bytes"
                ),
            )
        )

    return errors


# --- Uploader ---


class ImageUploader:
    """Runs the upload pipeline for one backend bucket store."""

    def __init__(
        self,
        storage: StoragePort,
        clock: TimePort,
        *,
        optimizer: ImageOptimizerPort | None = None,
        policy: UploadPolicy | None = None,
        feedback: FeedbackPort | None = None,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._optimizer = optimizer
        self._policy = policy or UploadPolicy()
        self._feedback = feedback

    @property
    def policy(self) -> UploadPolicy:
        return self._policy

    async def upload(self, inp: UploadImageInput) -> UploadOutput:
        errors = validate_upload(inp.data, inp.content_type, self._policy)
        if errors:
            self._error(errors[0].message)
            return UploadOutput(success=False, errors=errors, error=errors[0].message)

        data, content_type = inp.data, inp.content_type
        if self._optimizer is not None:
            try:
                processed = await self._optimizer.optimize(
                    data,
                    max_width=self._policy.max_width,
                    max_height=self._policy.max_height,
                    quality=self._policy.quality,
                )
            except ImageProcessingError as exc:
                logger.warning("Image preprocessing failed for %s: %s", inp.filename, exc)
                self._error("Failed to process image")
                return UploadOutput(success=False, error=str(exc))
            data, content_type = processed.data, processed.content_type

        name = build_filename(
            inp.prefix,
            epoch_millis(self._clock.now_utc()),
            pick_extension(inp.filename, inp.content_type),
            inp.sequence,
        )

        try:
            result = await self._storage.upload_file(data, inp.bucket, name, content_type)
        except RemoteError as exc:
            logger.error("Upload of %s to %s failed: %s", name, inp.bucket, exc)
            self._error("Failed to upload image")
            return UploadOutput(success=False, error=str(exc))

        logger.info("Uploaded %s (%d bytes) to %s", result.path, len(data), result.bucket)
        return UploadOutput(
            success=True,
            public_url=result.public_url,
            path=result.path,
            size_bytes=len(data),
        )

    def _error(self, message: str) -> None:
        if self._feedback:
            self._feedback.error(message)
