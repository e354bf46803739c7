"""
Settings component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from folio.core.entities import SiteSetting
from folio.core.ports.remote import ChangeCallback, FeedHandle


class SettingsSourcePort(Protocol):
    """Read side of the settings table plus its change feed."""

    async def get_site_settings(self) -> list[SiteSetting]:
        """All settings rows, ordered by key."""
        ...

    def subscribe(self, table: str, on_event: ChangeCallback) -> FeedHandle:
        """Open a change feed scoped to `table`."""
        ...


class SettingsAdminPort(Protocol):
    """Write side used by the admin settings editor."""

    async def get_site_settings(self) -> list[SiteSetting]: ...
    async def upsert_site_setting(self, key: str, value: str) -> SiteSetting: ...
    async def delete_site_setting(self, key: str) -> None: ...
