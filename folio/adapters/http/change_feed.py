"""
Polling change feed.

Announces row-level changes on one table by re-reading it on an
interval and diffing the rows against the previous read. The first
read only sets the baseline.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from folio.core.ports.remote import ChangeCallback, ChangeEvent, RemoteError

logger = logging.getLogger(__name__)

RowFetcher = Callable[[], Awaitable[list[Mapping[str, Any]]]]


def fingerprint(row: Mapping[str, Any]) -> str:
    return json.dumps(row, sort_keys=True, default=str)


def diff_rows(
    table: str,
    before: Mapping[str, Mapping[str, Any]],
    after: Mapping[str, Mapping[str, Any]],
) -> list[ChangeEvent]:
    """Events that turn `before` into `after`, both keyed by row identity."""
    events: list[ChangeEvent] = []
    for key, row in after.items():
        old = before.get(key)
        if old is None:
            events.append(ChangeEvent(table=table, change_type="INSERT", record=row))
        elif fingerprint(old) != fingerprint(row):
            events.append(
                ChangeEvent(table=table, change_type="UPDATE", record=row, old_record=old)
            )
    for key, old in before.items():
        if key not in after:
            events.append(ChangeEvent(table=table, change_type="DELETE", old_record=old))
    return events


class PollingChangeFeed:
    """FeedHandle that polls `fetch` until unsubscribed."""

    def __init__(
        self,
        table: str,
        fetch: RowFetcher,
        on_event: ChangeCallback,
        *,
        interval: float = 5.0,
        key_field: str = "id",
    ) -> None:
        self.table = table
        self._fetch = fetch
        self._on_event = on_event
        self._interval = interval
        self._key_field = key_field
        self._snapshot: dict[str, Mapping[str, Any]] | None = None
        self._task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def active(self) -> bool:
        return self._task is not None and not self._closed

    def start(self) -> PollingChangeFeed:
        """Begin polling on the running event loop."""
        if self._task is None and not self._closed:
            self._task = asyncio.get_running_loop().create_task(self._run())
        return self

    def unsubscribe(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._task is not None:
            self._task.cancel()

    async def aclose(self) -> None:
        """Unsubscribe and wait for the poll task to finish."""
        self.unsubscribe()
        if self._task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

    async def poll_once(self) -> list[ChangeEvent]:
        rows = await self._fetch()
        current = {str(row.get(self._key_field)): row for row in rows}
        previous, self._snapshot = self._snapshot, current
        if previous is None or self._closed:
            return []

        events = diff_rows(self.table, previous, current)
        for event in events:
            try:
                self._on_event(event)
            except Exception:
                logger.exception("Change callback for %s failed", self.table)
        return events

    async def _run(self) -> None:
        while not self._closed:
            try:
                await self.poll_once()
            except RemoteError as exc:
                logger.warning("Polling %s failed: %s", self.table, exc)
            except Exception:
                logger.exception("Polling %s failed unexpectedly", self.table)
            await asyncio.sleep(self._interval)
