"""
Ports consumed by the folio stores and managers.

All external collaborators (hosted backend, auth, email side-channel,
image codec, clock, user feedback) sit behind these Protocols.
"""

from folio.core.ports.auth import AuthBackendPort, AuthError, SessionStoragePort
from folio.core.ports.feedback import FeedbackPort
from folio.core.ports.images import ImageOptimizerPort, ImageProcessingError, ProcessedImage
from folio.core.ports.notify import ContactMessage, ContactNotifierPort, NotifyResult, NotifyStatus
from folio.core.ports.remote import (
    ChangeEvent,
    FeedHandle,
    RecordNotFoundError,
    RemoteDataPort,
    RemoteError,
    RemoteValidationError,
    TransportError,
    UploadError,
    UploadResult,
)
from folio.core.ports.time import TimePort

__all__ = [
    # Remote
    "RemoteDataPort",
    "ChangeEvent",
    "FeedHandle",
    "UploadResult",
    "RemoteError",
    "TransportError",
    "RemoteValidationError",
    "RecordNotFoundError",
    "UploadError",
    # Auth
    "AuthBackendPort",
    "SessionStoragePort",
    "AuthError",
    # Notify
    "ContactNotifierPort",
    "ContactMessage",
    "NotifyResult",
    "NotifyStatus",
    # Images
    "ImageOptimizerPort",
    "ProcessedImage",
    "ImageProcessingError",
    # Misc
    "FeedbackPort",
    "TimePort",
]
