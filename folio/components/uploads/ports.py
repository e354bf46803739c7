"""
Uploads component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from folio.core.ports.remote import UploadResult


class StoragePort(Protocol):
    """Bucket storage on the hosted backend."""

    async def upload_file(
        self, data: bytes, bucket: str, filename: str, content_type: str | None = None
    ) -> UploadResult: ...
