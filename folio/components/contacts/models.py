"""
Contacts component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from folio.core.entities import Contact
from folio.core.ports.notify import NotifyResult


@dataclass(frozen=True)
class ContactFieldError:
    """Form-level validation error."""

    field: str
    message: str


@dataclass(frozen=True)
class ContactSubmitOutput:
    """
    Output from the public contact form.

    `success` reflects the stored row only; `notification` reports the
    email side-channel separately.
    """

    success: bool
    contact: Contact | None = None
    notification: NotifyResult | None = None
    errors: list[ContactFieldError] = field(default_factory=list)
    error: str | None = None
