"""
Records component input/output models.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class AfterWrite(Enum):
    """How the local list absorbs a confirmed write."""

    APPEND_IN_PLACE = "append"  # insert at the edge given by the sort order
    REPLACE_IN_PLACE = "replace"  # swap the element with the same id
    FULL_RELOAD = "reload"  # re-read the whole list (server-side side effects)


@dataclass(frozen=True)
class WritePolicy:
    after_create: AfterWrite = AfterWrite.APPEND_IN_PLACE
    after_update: AfterWrite = AfterWrite.REPLACE_IN_PLACE


@dataclass(frozen=True)
class SortOrder:
    """Canonical order of a cached list. Rows missing the field sort last."""

    field: str
    descending: bool = False

    def sort(self, items: Iterable[T]) -> list[T]:
        present: list[T] = []
        missing: list[T] = []
        for item in items:
            (missing if getattr(item, self.field, None) is None else present).append(item)
        present.sort(key=self._key, reverse=self.descending)
        return present + missing

    def _key(self, item: Any) -> Any:
        return getattr(item, self.field)


@dataclass(frozen=True)
class ReloadOutput(Generic[T]):
    success: bool
    items: tuple[T, ...] = ()
    error: str | None = None


@dataclass(frozen=True)
class MutationOutput(Generic[T]):
    success: bool
    item: T | None = None
    error: str | None = None
