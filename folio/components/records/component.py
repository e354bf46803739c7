"""
Records component - local list cache synchronized with remote CRUD.

One EntityManager instance owns the cached list of one table. The
remote service stays authoritative: the list is rebuilt wholesale by
reload() and patched in place only after the backend confirms a write.

Failure semantics:
- A failed write leaves the cached list exactly as it was and pushes an
  error message to the feedback port; nothing is raised to the caller.
- delete() is pessimistic: the element is removed only after the
  backend confirms.
- Writes on the same id are serialized; a write that completes for an
  id no longer in the cache never re-inserts it.
- After close(), late completions do not touch the cache.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, ClassVar, Generic, Self, TypeVar

from pydantic import ValidationError

from folio.core.entities import Draft, Record
from folio.core.ports.feedback import FeedbackPort
from folio.core.ports.remote import RemoteError

from .models import AfterWrite, MutationOutput, ReloadOutput, SortOrder, WritePolicy
from .ports import EntityGatewayPort

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Record)

DraftInput = Draft | Mapping[str, Any]


def describe_validation_error(exc: ValidationError) -> str:
    """First pydantic error as `field: message`."""
    first = exc.errors()[0] if exc.errors() else {}
    loc = ".".join(str(part) for part in first.get("loc", ())) or "_schema"
    return f"{loc}: {first.get('msg', 'Invalid value')}"


class EntityManager(Generic[T]):
    """
    Cached, ordered list of one record type plus CRUD synchronization.

    Subclasses set `label`, `plural`, `draft_model`, `order` and `policy`.
    Use `await Manager.open(...)` so the list is loaded on construction.
    """

    label: ClassVar[str] = "Record"
    plural: ClassVar[str] = "records"
    draft_model: ClassVar[type[Draft] | None] = None
    order: ClassVar[SortOrder] = SortOrder("order_index")
    policy: ClassVar[WritePolicy] = WritePolicy()

    def __init__(
        self,
        gateway: EntityGatewayPort[T],
        feedback: FeedbackPort | None = None,
    ) -> None:
        self._gateway = gateway
        self._feedback = feedback
        self._items: list[T] = []
        self._loaded = False
        self._closed = False
        self._locks: dict[str, asyncio.Lock] = {}

    @classmethod
    async def open(cls, *args: Any, **kwargs: Any) -> Self:
        """Construct and load the initial list."""
        manager = cls(*args, **kwargs)
        await manager.reload()
        return manager

    # --- Read side ---

    @property
    def items(self) -> tuple[T, ...]:
        return tuple(self._items)

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, item_id: str) -> T | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def __len__(self) -> int:
        return len(self._items)

    # --- Sync ---

    async def reload(self) -> ReloadOutput[T]:
        """Replace the whole list with a fresh server read."""
        try:
            rows = await self._gateway.list_all()
        except RemoteError as exc:
            logger.error("Failed to load %s: %s", self.plural, exc)
            self._error(f"Failed to load {self.plural}")
            return ReloadOutput(success=False, items=self.items, error=str(exc))

        if self._closed:
            return ReloadOutput(success=False, items=self.items, error="manager closed")

        self._items = self.order.sort(rows)
        self._loaded = True
        return ReloadOutput(success=True, items=self.items)

    async def create(self, draft: DraftInput) -> MutationOutput[T]:
        try:
            payload = self.create_payload(draft)
        except ValidationError as exc:
            return self._invalid(exc)

        return await self._mutate(
            "create",
            None,
            lambda: self._gateway.create(payload),
            self.policy.after_create,
        )

    async def update(self, item_id: str, patch: DraftInput) -> MutationOutput[T]:
        try:
            payload = self.update_payload(item_id, patch)
        except ValidationError as exc:
            return self._invalid(exc)

        return await self._mutate(
            "update",
            item_id,
            lambda: self._gateway.update(item_id, payload),
            self.policy.after_update,
        )

    async def delete(self, item_id: str) -> MutationOutput[T]:
        async with self._lock_for(item_id):
            try:
                await self._gateway.delete(item_id)
            except RemoteError as exc:
                logger.error("Failed to delete %s %s: %s", self.label.lower(), item_id, exc)
                self._error(f"Failed to delete {self.label.lower()}")
                return MutationOutput(success=False, error=str(exc))

            removed = self.get(item_id)
            if not self._closed:
                self._items = [item for item in self._items if item.id != item_id]

        self._success(f"{self.label} deleted successfully")
        return MutationOutput(success=True, item=removed)

    def close(self) -> None:
        """Detach from the view; later completions leave the cache alone."""
        self._closed = True

    # --- Payloads ---

    def create_payload(self, draft: DraftInput) -> dict[str, Any]:
        if isinstance(draft, Draft):
            return draft.payload()
        if self.draft_model is None:
            return dict(draft)
        return self.draft_model.model_validate(dict(draft)).payload()

    def update_payload(self, item_id: str, patch: DraftInput) -> dict[str, Any]:
        """
        Validated patch. A full Draft sends the fields it set; a mapping is
        checked against the cached record merged with the patch.
        """
        if isinstance(patch, Draft):
            return patch.model_dump(mode="json", exclude_unset=True)

        changes = dict(patch)
        if self.draft_model is None:
            return changes

        current = self.get(item_id)
        if current is None:
            return changes

        merged = {
            name: getattr(current, name)
            for name in self.draft_model.model_fields
            if hasattr(current, name)
        }
        merged.update(changes)
        validated = self.draft_model.model_validate(merged).payload()
        return {name: validated[name] for name in changes}

    # --- Internals ---

    def _lock_for(self, item_id: str | None) -> contextlib.AbstractAsyncContextManager[Any]:
        if item_id is None:
            return contextlib.nullcontext()
        lock = self._locks.get(item_id)
        if lock is None:
            lock = self._locks[item_id] = asyncio.Lock()
        return lock

    async def _mutate(
        self,
        action: str,
        item_id: str | None,
        call: Callable[[], Awaitable[T]],
        strategy: AfterWrite,
        *,
        success_message: str | None = None,
        error_message: str | None = None,
        announce: bool = True,
    ) -> MutationOutput[T]:
        async with self._lock_for(item_id):
            try:
                record = await call()
            except RemoteError as exc:
                logger.error(
                    "Failed to %s %s %s: %s", action, self.label.lower(), item_id or "", exc
                )
                self._error(error_message or f"Failed to save {self.label.lower()}")
                return MutationOutput(success=False, error=str(exc))

            if not self._closed:
                await self._absorb(record, strategy, inserting=(action == "create"))

        if announce:
            self._success(success_message or f"{self.label} {action}d successfully")
        return MutationOutput(success=True, item=record)

    async def _absorb(self, record: T, strategy: AfterWrite, *, inserting: bool) -> None:
        if strategy is AfterWrite.FULL_RELOAD:
            await self.reload()
            return

        for index, item in enumerate(self._items):
            if item.id == record.id:
                self._items[index] = record
                return

        if not inserting:
            # deleted while the update was in flight
            logger.debug("%s %s no longer cached; not re-inserting", self.label, record.id)
            return

        if strategy is AfterWrite.APPEND_IN_PLACE and self.order.descending:
            self._items.insert(0, record)
        else:
            self._items.append(record)

    def _invalid(self, exc: ValidationError) -> MutationOutput[T]:
        message = describe_validation_error(exc)
        logger.info("Rejected %s payload: %s", self.label.lower(), message)
        self._error(f"Invalid {self.label.lower()}: {message}")
        return MutationOutput(success=False, error=message)

    def _success(self, message: str) -> None:
        if self._feedback:
            self._feedback.success(message)

    def _error(self, message: str) -> None:
        if self._feedback:
            self._feedback.error(message)

