"""
Remote Data Client Interface.

Protocol-based interface for the hosted backend that owns every
portfolio table. Pure request/response; no caching happens behind
this port.

Implementation strategies:
1. RestDataClient: PostgREST-style REST over httpx (production)
2. InMemoryBackend: dict-backed tables (dev/test, CLI demo mode)

Change notifications arrive through `subscribe(table, on_event)`,
which returns a handle whose `unsubscribe()` is idempotent.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal, Protocol

from folio.core.entities import (
    Contact,
    Project,
    ProjectImage,
    SiteSetting,
    Skill,
    Testimonial,
)

ChangeType = Literal["INSERT", "UPDATE", "DELETE"]


@dataclass(frozen=True)
class ChangeEvent:
    """Row-level change announced on a table feed."""

    table: str
    change_type: ChangeType
    record: Mapping[str, Any] | None = None
    old_record: Mapping[str, Any] | None = None


ChangeCallback = Callable[[ChangeEvent], None]


class FeedHandle(Protocol):
    """Disposable subscription handle."""

    def unsubscribe(self) -> None:
        """Close the feed. Safe to call more than once."""
        ...


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a storage upload."""

    public_url: str
    bucket: str
    path: str


class RemoteDataPort(Protocol):
    """
    CRUD surface of the hosted backend.

    Every coroutine may raise a RemoteError subclass.
    """

    # Projects
    async def get_projects(self) -> list[Project]: ...
    async def create_project(self, draft: Mapping[str, Any]) -> Project: ...
    async def update_project(self, project_id: str, patch: Mapping[str, Any]) -> Project: ...
    async def delete_project(self, project_id: str) -> None: ...

    # Project images
    async def get_project_images(self, project_id: str) -> list[ProjectImage]: ...
    async def add_project_image(
        self, project_id: str, image_url: str, order_index: int = 0
    ) -> ProjectImage: ...
    async def delete_project_image(self, image_id: str) -> None: ...
    async def delete_project_images(self, project_id: str) -> None: ...

    # Testimonials
    async def get_testimonials(self) -> list[Testimonial]: ...
    async def create_testimonial(self, draft: Mapping[str, Any]) -> Testimonial: ...
    async def update_testimonial(
        self, testimonial_id: str, patch: Mapping[str, Any]
    ) -> Testimonial: ...
    async def delete_testimonial(self, testimonial_id: str) -> None: ...

    # Skills
    async def get_skills(self) -> list[Skill]: ...
    async def create_skill(self, draft: Mapping[str, Any]) -> Skill: ...
    async def update_skill(self, skill_id: str, patch: Mapping[str, Any]) -> Skill: ...
    async def delete_skill(self, skill_id: str) -> None: ...

    # Site settings
    async def get_site_settings(self) -> list[SiteSetting]: ...
    async def upsert_site_setting(self, key: str, value: str) -> SiteSetting: ...
    async def delete_site_setting(self, key: str) -> None: ...

    # Contacts
    async def get_contacts(self) -> list[Contact]: ...
    async def create_contact(self, draft: Mapping[str, Any]) -> Contact: ...
    async def update_contact_status(self, contact_id: str, status: str) -> Contact: ...
    async def delete_contact(self, contact_id: str) -> None: ...

    # Storage
    async def upload_file(
        self, data: bytes, bucket: str, filename: str, content_type: str | None = None
    ) -> UploadResult: ...

    # Change notifications
    def subscribe(self, table: str, on_event: ChangeCallback) -> FeedHandle: ...


# --- Error Types ---


class RemoteError(Exception):
    """Base exception for backend request failures."""

    def __init__(
        self,
        message: str,
        operation: str = "",
        status_code: int | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.operation = operation
        self.status_code = status_code
        self.details = dict(details or {})
        super().__init__(message)

    def __str__(self) -> str:
        where = f"{self.operation}: " if self.operation else ""
        code = f" (HTTP {self.status_code})" if self.status_code is not None else ""
        return f"{where}{self.message}{code}"


class TransportError(RemoteError):
    """Network failure or timeout before a response arrived."""


class RemoteValidationError(RemoteError):
    """The backend rejected the request payload."""


class RecordNotFoundError(RemoteError):
    """The addressed row does not exist."""


class UploadError(RemoteError):
    """Storage upload was rejected or failed."""
