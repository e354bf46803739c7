"""
Feedback sinks.

LoggingFeedback routes user-visible messages to the log and keeps
them in memory so the CLI (and tests) can replay what the user saw.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from folio.core.ports.feedback import FeedbackLevel

logger = logging.getLogger(__name__)

_LEVELS: dict[str, int] = {
    "success": logging.INFO,
    "info": logging.INFO,
    "error": logging.ERROR,
}


@dataclass
class LoggingFeedback:
    messages: list[tuple[FeedbackLevel, str]] = field(default_factory=list)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def info(self, message: str) -> None:
        self._emit("info", message)

    @property
    def errors(self) -> list[str]:
        return [message for level, message in self.messages if level == "error"]

    def drain(self) -> list[tuple[FeedbackLevel, str]]:
        """Return and forget everything collected so far."""
        drained, self.messages = self.messages, []
        return drained

    def _emit(self, level: FeedbackLevel, message: str) -> None:
        self.messages.append((level, message))
        logger.log(_LEVELS[level], "[%s] %s", level, message)
