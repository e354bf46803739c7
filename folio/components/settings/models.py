"""
Settings component input/output models.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from folio.core.entities import SiteSetting

_EMPTY: Mapping[str, str] = MappingProxyType({})


@dataclass(frozen=True)
class SettingsSnapshot:
    """
    Synchronous read view of the settings cache.

    `values` is exactly the server state at the last successful sync.
    `loaded` may be True while `values` is empty (no settings configured
    yet, or the first fetch failed); callers must not read an empty map
    as "still loading".
    """

    values: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    loaded: bool = False
    defaults: Mapping[str, str] = field(default_factory=lambda: _EMPTY)

    def get(self, key: str, default: str | None = None) -> str | None:
        """Cached value, else the configured content default, else `default`."""
        value = self.values.get(key)
        if value:
            return value
        return self.defaults.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class FetchSettingsOutput:
    """Result of one fetch-and-replace cycle."""

    success: bool
    count: int = 0
    error: str | None = None
    stale: bool = False  # completion arrived after teardown and was dropped


@dataclass(frozen=True)
class UpsertSettingInput:
    key: str
    value: str


@dataclass(frozen=True)
class DeleteSettingInput:
    key: str


@dataclass(frozen=True)
class SettingValidationError:
    field: str
    code: str
    message: str


@dataclass(frozen=True)
class SettingWriteOutput:
    """Output from an admin write to the settings table."""

    success: bool
    setting: SiteSetting | None = None
    error: str | None = None
    errors: list[SettingValidationError] = field(default_factory=list)
