"""
Records component port definitions.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

T = TypeVar("T")


class EntityGatewayPort(Protocol[T]):
    """Remote CRUD for one table."""

    async def list_all(self) -> list[T]: ...
    async def create(self, draft: Mapping[str, Any]) -> T: ...
    async def update(self, item_id: str, patch: Mapping[str, Any]) -> T: ...
    async def delete(self, item_id: str) -> None: ...


@dataclass(frozen=True)
class RemoteGateway(Generic[T]):
    """
    EntityGatewayPort assembled from the per-table coroutines of a
    RemoteDataPort, e.g. `RemoteGateway(remote.get_skills, remote.create_skill, ...)`.
    """

    list_all: Callable[[], Awaitable[list[T]]]
    create: Callable[[Mapping[str, Any]], Awaitable[T]]
    update: Callable[[str, Mapping[str, Any]], Awaitable[T]]
    delete: Callable[[str], Awaitable[None]]
