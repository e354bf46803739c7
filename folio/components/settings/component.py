"""
Settings component - site settings cache, change subscription and
admin editor.

The store keeps a key -> value copy of the `site_settings` table.
Every sync is a full replacement of the previous map; partial merges
are never performed, so keys deleted on the server disappear locally
on the next sync.

Key behaviors:
- fetch_and_replace() marks the store loaded even when the read fails,
  keeping the previous map
- at most one change feed is open per store; subscribing again closes
  the previous feed first
- unsubscribe() is idempotent
- completions that land after teardown() are discarded
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType

from folio.core.entities import SiteSetting
from folio.core.ports.feedback import FeedbackPort
from folio.core.ports.remote import ChangeEvent, FeedHandle, RemoteError

from .models import (
    DeleteSettingInput,
    FetchSettingsOutput,
    SettingsSnapshot,
    SettingValidationError,
    SettingWriteOutput,
    UpsertSettingInput,
)
from .ports import SettingsAdminPort, SettingsSourcePort

logger = logging.getLogger(__name__)

SETTINGS_TABLE = "site_settings"

SnapshotListener = Callable[[SettingsSnapshot], None]


def build_settings_map(rows: Iterable[SiteSetting]) -> dict[str, str]:
    """Denormalize rows into a map. Duplicate keys: the last row wins."""
    settings_map: dict[str, str] = {}
    for row in rows:
        settings_map[row.key] = row.value
    return settings_map


class SettingsStore:
    """
    Eventually-fresh local copy of the site settings map.

    Owned by the application context: `subscribe()` once on startup,
    `teardown()` once on shutdown.
    """

    def __init__(
        self,
        source: SettingsSourcePort,
        *,
        table: str = SETTINGS_TABLE,
        defaults: Mapping[str, str] | None = None,
    ) -> None:
        self._source = source
        self._table = table
        self._defaults: Mapping[str, str] = MappingProxyType(dict(defaults or {}))
        self._map: Mapping[str, str] = MappingProxyType({})
        self._loaded = False
        self._handle: FeedHandle | None = None
        self._generation = 0
        self._refreshes: set[asyncio.Task[FetchSettingsOutput]] = set()
        self._listeners: list[SnapshotListener] = []

    # --- Read side ---

    @property
    def snapshot(self) -> SettingsSnapshot:
        """Current `{map, loaded}` view. Never touches the network."""
        return SettingsSnapshot(values=self._map, loaded=self._loaded, defaults=self._defaults)

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def subscribed(self) -> bool:
        return self._handle is not None

    def add_listener(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call `listener` after every sync. Returns a remover."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # --- Sync ---

    async def fetch_and_replace(self) -> FetchSettingsOutput:
        """Read every setting and swap the local map for the fresh one."""
        generation = self._generation
        try:
            rows = await self._source.get_site_settings()
        except Exception as exc:
            if generation != self._generation:
                return FetchSettingsOutput(success=False, error=str(exc), stale=True)
            logger.warning(
                "Failed to fetch site settings, keeping %d cached: %s", len(self._map), exc
            )
            self._loaded = True
            self._publish()
            return FetchSettingsOutput(success=False, count=len(self._map), error=str(exc))

        if generation != self._generation:
            logger.debug("Dropping settings read that completed after teardown")
            return FetchSettingsOutput(success=False, error="store was torn down", stale=True)

        self._map = MappingProxyType(build_settings_map(rows))
        self._loaded = True
        logger.debug("Site settings replaced (%d keys)", len(self._map))
        self._publish()
        return FetchSettingsOutput(success=True, count=len(self._map))

    def _publish(self) -> None:
        snapshot = self.snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Settings listener failed")

    # --- Subscription ---

    def subscribe(self) -> None:
        """Open the change feed, closing any feed this store already holds."""
        self.unsubscribe()
        self._handle = self._source.subscribe(self._table, self._on_change)
        logger.info("Subscribed to %s changes", self._table)

    def unsubscribe(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        handle.unsubscribe()
        logger.info("Unsubscribed from %s changes", self._table)

    def _on_change(self, event: ChangeEvent) -> None:
        logger.info("Site settings changed: %s", event.change_type)
        task = asyncio.get_running_loop().create_task(self.fetch_and_replace())
        self._refreshes.add(task)
        task.add_done_callback(self._refreshes.discard)

    async def wait_idle(self) -> None:
        """Wait for refreshes triggered by change events to finish."""
        while self._refreshes:
            await asyncio.gather(*list(self._refreshes), return_exceptions=True)

    # --- Lifecycle ---

    def teardown(self) -> None:
        """Close the feed and reset to the not-loaded state."""
        self.unsubscribe()
        self._generation += 1
        self._map = MappingProxyType({})
        self._loaded = False


# --- Admin editor ---


def validate_setting(key: str, value: str) -> list[SettingValidationError]:
    errors: list[SettingValidationError] = []
    if not key.strip():
        errors.append(SettingValidationError("key", "required", "Setting key is required"))
    elif any(ch.isspace() for ch in key.strip()):
        errors.append(
            SettingValidationError("key", "invalid_key", "Setting key must not contain spaces")
        )
    if not value.strip():
        errors.append(SettingValidationError("value", "required", "Setting value is required"))
    return errors


class SettingsEditor:
    """
    Admin CRUD over individual settings rows.

    Each successful write triggers a full refresh of the shared store so
    the public site sees the change even without a working change feed.
    """

    def __init__(
        self,
        admin: SettingsAdminPort,
        store: SettingsStore,
        feedback: FeedbackPort | None = None,
    ) -> None:
        self._admin = admin
        self._store = store
        self._feedback = feedback

    async def rows(self) -> list[SiteSetting]:
        """Settings rows sorted by key, for the editor table."""
        try:
            rows = await self._admin.get_site_settings()
        except RemoteError as exc:
            logger.error("Error loading settings: %s", exc)
            self._error("Failed to load settings")
            return []
        return sorted(rows, key=lambda row: row.key)

    async def upsert(self, inp: UpsertSettingInput) -> SettingWriteOutput:
        errors = validate_setting(inp.key, inp.value)
        if errors:
            self._error("Please provide both key and value")
            return SettingWriteOutput(success=False, error=errors[0].message, errors=errors)

        key, value = inp.key.strip(), inp.value.strip()
        try:
            saved = await self._admin.upsert_site_setting(key, value)
        except RemoteError as exc:
            logger.error("Error saving setting %s: %s", key, exc)
            self._error("Failed to save setting")
            return SettingWriteOutput(success=False, error=str(exc))

        await self._store.fetch_and_replace()
        if self._feedback:
            self._feedback.success(f"Setting '{key}' saved")
        return SettingWriteOutput(success=True, setting=saved)

    async def delete(self, inp: DeleteSettingInput) -> SettingWriteOutput:
        key = inp.key.strip()
        if not key:
            errors = [SettingValidationError("key", "required", "Setting key is required")]
            return SettingWriteOutput(success=False, error=errors[0].message, errors=errors)

        try:
            await self._admin.delete_site_setting(key)
        except RemoteError as exc:
            logger.error("Error deleting setting %s: %s", key, exc)
            self._error("Failed to delete setting")
            return SettingWriteOutput(success=False, error=str(exc))

        await self._store.fetch_and_replace()
        if self._feedback:
            self._feedback.success(f"Setting '{key}' deleted")
        return SettingWriteOutput(success=True)

    def _error(self, message: str) -> None:
        if self._feedback:
            self._feedback.error(message)
