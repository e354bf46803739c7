"""
Uploads component - image validation, preprocessing and storage.
"""

from .component import (
    ImageUploader,
    build_filename,
    mime_to_extension,
    pick_extension,
    validate_upload,
)
from .models import UploadImageInput, UploadOutput, UploadPolicy, UploadValidationError
from .ports import StoragePort

__all__ = [
    "ImageUploader",
    "build_filename",
    "mime_to_extension",
    "pick_extension",
    "validate_upload",
    "UploadImageInput",
    "UploadOutput",
    "UploadPolicy",
    "UploadValidationError",
    "StoragePort",
]
