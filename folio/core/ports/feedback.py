"""
User feedback port.

Transient, user-visible messages ("Project deleted successfully",
"Failed to load projects"). The admin console shows them as toasts;
the CLI prints them.
"""

from __future__ import annotations

from typing import Literal, Protocol

FeedbackLevel = Literal["success", "error", "info"]


class FeedbackPort(Protocol):
    def success(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def info(self, message: str) -> None: ...
