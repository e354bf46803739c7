"""
Dev Contact Notifier.

Logs new-contact notifications instead of calling the email
function. Used for local development, the CLI demo mode and tests.

Key behaviors:
- Logs the message details
- Returns SKIPPED status (not SENT)
- Stores messages in memory for test assertions
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from folio.core.ports.notify import ContactMessage, NotifyResult

logger = logging.getLogger(__name__)


@dataclass
class LoggedNotification:
    """Record of a logged notification for test assertions."""

    id: str
    message: ContactMessage
    logged_at: datetime


@dataclass
class DevContactNotifier:
    """
    Notifier that logs instead of sending.

    Implements ContactNotifierPort.
    """

    notifications: list[LoggedNotification] = field(default_factory=list)

    log_level: int = logging.INFO
    log_body: bool = True
    body_preview_length: int = 100

    async def notify(self, message: ContactMessage) -> NotifyResult:
        notification_id = f"dev-{uuid4().hex[:12]}"
        self.notifications.append(
            LoggedNotification(id=notification_id, message=message, logged_at=datetime.now(UTC))
        )

        parts = [
            f"CONTACT (dev): From={message.name} <{message.email}>",
            f"Subject={message.subject}",
        ]
        if self.log_body and message.message:
            preview = message.message[: self.body_preview_length]
            if len(message.message) > self.body_preview_length:
                preview += "..."
            parts.append(f"Body={preview}")
        parts.append(f"ID={notification_id}")
        logger.log(self.log_level, ", ".join(parts))

        return NotifyResult.skipped("Dev mode - notification logged, not sent")

    # --- Test Helper Methods ---

    def get_last(self) -> LoggedNotification | None:
        return self.notifications[-1] if self.notifications else None

    @property
    def count(self) -> int:
        return len(self.notifications)

    def clear(self) -> None:
        self.notifications.clear()
