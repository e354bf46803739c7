"""
Time port.

Injected wherever the current time leaks into data (upload file
names, in-memory row timestamps) so tests stay deterministic.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class TimePort(Protocol):
    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


def epoch_millis(moment: datetime) -> int:
    """Milliseconds since the Unix epoch, as used in upload file names."""
    return int(moment.timestamp() * 1000)
