"""
Contact Notification Interface.

Fire-and-forget side-channel triggered after a contact form
submission has been stored. Delivery problems are reported in the
result, never raised, so the caller's success path is independent of
email delivery.

Implementation strategies:
1. HttpContactNotifier: POSTs to the serverless email function
2. DevContactNotifier: logs the message (dev/test)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Protocol


class NotifyStatus(Enum):
    """Notification attempt status."""

    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"  # Dev adapter or disabled


@dataclass(frozen=True)
class ContactMessage:
    """The fields forwarded to the email function."""

    name: str
    email: str
    subject: str
    message: str

    def __post_init__(self) -> None:
        if not (self.name and self.email and self.subject and self.message):
            raise ValueError("name, email, subject and message are all required")

    def as_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
        }


@dataclass
class NotifyResult:
    """Result of a notification attempt."""

    status: NotifyStatus
    error: str | None = None
    status_code: int | None = None
    sent_at: datetime | None = None

    @classmethod
    def sent(cls, status_code: int | None = None) -> NotifyResult:
        return cls(status=NotifyStatus.SENT, status_code=status_code, sent_at=datetime.now(UTC))

    @classmethod
    def skipped(cls, reason: str = "Dev mode") -> NotifyResult:
        return cls(status=NotifyStatus.SKIPPED, error=reason)

    @classmethod
    def failed(cls, error: str, status_code: int | None = None) -> NotifyResult:
        return cls(status=NotifyStatus.FAILED, error=error, status_code=status_code)

    @property
    def ok(self) -> bool:
        return self.status is not NotifyStatus.FAILED


class ContactNotifierPort(Protocol):
    async def notify(self, message: ContactMessage) -> NotifyResult:
        """
        Deliver a new-contact notification.

        Must not raise; failures are returned as NotifyStatus.FAILED.
        """
        ...
