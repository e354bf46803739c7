"""
Contacts component - inbox manager and public contact form.
"""

from .component import (
    ARCHIVED,
    NEW,
    READ,
    REPLIED,
    ContactsManager,
    ContactSubmission,
)
from .models import ContactFieldError, ContactSubmitOutput
from .ports import ContactInboxPort, ContactsRemotePort

__all__ = [
    "ContactsManager",
    "ContactSubmission",
    "ContactSubmitOutput",
    "ContactFieldError",
    "ContactsRemotePort",
    "ContactInboxPort",
    "NEW",
    "READ",
    "REPLIED",
    "ARCHIVED",
]
