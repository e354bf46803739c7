"""
In-memory backend.

Complete RemoteDataPort held in dicts: used by the CLI demo mode and
the integration tests. Change events are delivered synchronously to
subscribers after each write. Any operation can be made to fail with
`fail_on` / `fail_next` to exercise error paths.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from folio.core.entities import (
    CONTACT_STATUSES,
    Contact,
    Project,
    ProjectImage,
    SiteSetting,
    Skill,
    Testimonial,
)
from folio.core.ports.remote import (
    ChangeCallback,
    ChangeEvent,
    ChangeType,
    RecordNotFoundError,
    RemoteError,
    RemoteValidationError,
    UploadError,
    UploadResult,
)
from folio.core.ports.time import TimePort

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

TABLES = ("projects", "project_images", "testimonials", "skills", "site_settings", "contacts")


class _Subscription:
    def __init__(self, backend: InMemoryBackend, table: str, callback: ChangeCallback) -> None:
        self.table = table
        self.callback = callback
        self._backend = backend
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._backend._subscriptions.remove(self)


class InMemoryBackend:
    def __init__(self, clock: TimePort | None = None) -> None:
        self._clock = clock
        self.rows: dict[str, dict[str, dict[str, Any]]] = {table: {} for table in TABLES}
        self.objects: dict[str, bytes] = {}
        self.fail_on: dict[str, Exception] = {}
        self._fail_once: dict[str, Exception] = {}
        self._subscriptions: list[_Subscription] = []
        self._ids = itertools.count(1)
        self.calls: list[str] = []

    # --- Test controls ---

    def fail_next(self, operation: str, error: Exception | None = None) -> None:
        self._fail_once[operation] = error or RemoteValidationError(
            "Injected failure", operation=operation, status_code=500
        )

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    # --- Plumbing ---

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self._fail_once:
            raise self._fail_once.pop(operation)
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def _now(self) -> datetime:
        return self._clock.now_utc() if self._clock else datetime.now(UTC)

    def _emit(
        self,
        table: str,
        change_type: ChangeType,
        record: Mapping[str, Any] | None = None,
        old_record: Mapping[str, Any] | None = None,
    ) -> None:
        event = ChangeEvent(
            table=table, change_type=change_type, record=record, old_record=old_record
        )
        for sub in list(self._subscriptions):
            if sub.active and sub.table == table:
                try:
                    sub.callback(event)
                except Exception:
                    logger.exception("Subscriber on %s failed", table)

    @staticmethod
    def _validate(model: type[M], row: Mapping[str, Any], operation: str) -> M:
        try:
            return model.model_validate(row)
        except ValidationError as exc:
            raise RemoteValidationError(str(exc), operation=operation, status_code=400) from exc

    def _insert(self, table: str, draft: Mapping[str, Any], model: type[M], operation: str) -> M:
        self._enter(operation)
        row = {**draft, "id": str(next(self._ids)), "created_at": self._now().isoformat()}
        record = self._validate(model, row, operation)
        self.rows[table][row["id"]] = row
        self._emit(table, "INSERT", row)
        return record

    def _update(
        self,
        table: str,
        row_id: str,
        patch: Mapping[str, Any],
        model: type[M],
        operation: str,
    ) -> dict[str, Any]:
        self._enter(operation)
        old = self.rows[table].get(row_id)
        if old is None:
            raise RecordNotFoundError(
                f"No {table} row {row_id}", operation=operation, status_code=404
            )
        row = {**old, **patch}
        self._validate(model, row, operation)
        self.rows[table][row_id] = row
        self._emit(table, "UPDATE", row, old)
        return row

    def _delete_where(
        self, table: str, predicate: Callable[[dict[str, Any]], bool], operation: str
    ) -> int:
        self._enter(operation)
        doomed = [row_id for row_id, row in self.rows[table].items() if predicate(row)]
        for row_id in doomed:
            old = self.rows[table].pop(row_id)
            self._emit(table, "DELETE", old_record=old)
        return len(doomed)

    # --- Projects ---

    def _project(self, row: Mapping[str, Any]) -> Project:
        images = sorted(
            (r for r in self.rows["project_images"].values() if r["project_id"] == row["id"]),
            key=lambda r: r.get("order_index", 0),
        )
        return Project.model_validate({**row, "images": images})

    async def get_projects(self) -> list[Project]:
        self._enter("get_projects")
        projects = [self._project(row) for row in self.rows["projects"].values()]
        return sorted(projects, key=lambda p: p.order_index)

    async def create_project(self, draft: Mapping[str, Any]) -> Project:
        record = self._insert("projects", draft, Project, "create_project")
        return self._project(self.rows["projects"][record.id])

    async def update_project(self, project_id: str, patch: Mapping[str, Any]) -> Project:
        row = self._update(
            "projects",
            project_id,
            {**patch, "updated_at": self._now().isoformat()},
            Project,
            "update_project",
        )
        return self._project(row)

    async def delete_project(self, project_id: str) -> None:
        if not self._delete_where("projects", lambda r: r["id"] == project_id, "delete_project"):
            raise RecordNotFoundError(
                f"No project {project_id}", operation="delete_project", status_code=404
            )

    # --- Project images ---

    async def get_project_images(self, project_id: str) -> list[ProjectImage]:
        self._enter("get_project_images")
        rows = [r for r in self.rows["project_images"].values() if r["project_id"] == project_id]
        images = [ProjectImage.model_validate(r) for r in rows]
        return sorted(images, key=lambda i: i.order_index)

    async def add_project_image(
        self, project_id: str, image_url: str, order_index: int = 0
    ) -> ProjectImage:
        if project_id not in self.rows["projects"]:
            raise RemoteValidationError(
                "project_id violates foreign key", operation="add_project_image", status_code=409
            )
        return self._insert(
            "project_images",
            {"project_id": project_id, "image_url": image_url, "order_index": order_index},
            ProjectImage,
            "add_project_image",
        )

    async def delete_project_image(self, image_id: str) -> None:
        self._delete_where(
            "project_images", lambda r: r["id"] == image_id, "delete_project_image"
        )

    async def delete_project_images(self, project_id: str) -> None:
        self._delete_where(
            "project_images", lambda r: r["project_id"] == project_id, "delete_project_images"
        )

    # --- Testimonials ---

    async def get_testimonials(self) -> list[Testimonial]:
        self._enter("get_testimonials")
        items = [Testimonial.model_validate(r) for r in self.rows["testimonials"].values()]
        return sorted(items, key=lambda t: t.created_at or EPOCH, reverse=True)

    async def create_testimonial(self, draft: Mapping[str, Any]) -> Testimonial:
        return self._insert("testimonials", draft, Testimonial, "create_testimonial")

    async def update_testimonial(
        self, testimonial_id: str, patch: Mapping[str, Any]
    ) -> Testimonial:
        row = self._update("testimonials", testimonial_id, patch, Testimonial, "update_testimonial")
        return Testimonial.model_validate(row)

    async def delete_testimonial(self, testimonial_id: str) -> None:
        self._delete_where(
            "testimonials", lambda r: r["id"] == testimonial_id, "delete_testimonial"
        )

    # --- Skills ---

    async def get_skills(self) -> list[Skill]:
        self._enter("get_skills")
        items = [Skill.model_validate(r) for r in self.rows["skills"].values()]
        return sorted(items, key=lambda s: s.order_index)

    async def create_skill(self, draft: Mapping[str, Any]) -> Skill:
        return self._insert("skills", draft, Skill, "create_skill")

    async def update_skill(self, skill_id: str, patch: Mapping[str, Any]) -> Skill:
        return Skill.model_validate(self._update("skills", skill_id, patch, Skill, "update_skill"))

    async def delete_skill(self, skill_id: str) -> None:
        self._delete_where("skills", lambda r: r["id"] == skill_id, "delete_skill")

    # --- Site settings ---

    async def get_site_settings(self) -> list[SiteSetting]:
        self._enter("get_site_settings")
        rows = sorted(self.rows["site_settings"].values(), key=lambda r: r["key"])
        return [SiteSetting.model_validate(r) for r in rows]

    async def upsert_site_setting(self, key: str, value: str) -> SiteSetting:
        self._enter("upsert_site_setting")
        table = self.rows["site_settings"]
        old = next((r for r in table.values() if r["key"] == key), None)
        row = {
            "id": old["id"] if old else str(next(self._ids)),
            "key": key,
            "value": value,
            "updated_at": self._now().isoformat(),
        }
        table[row["id"]] = row
        self._emit("site_settings", "UPDATE" if old else "INSERT", row, old)
        return SiteSetting.model_validate(row)

    async def delete_site_setting(self, key: str) -> None:
        self._delete_where("site_settings", lambda r: r["key"] == key, "delete_site_setting")

    # --- Contacts ---

    async def get_contacts(self) -> list[Contact]:
        self._enter("get_contacts")
        items = [Contact.model_validate(r) for r in self.rows["contacts"].values()]
        return sorted(items, key=lambda c: c.created_at or EPOCH, reverse=True)

    async def create_contact(self, draft: Mapping[str, Any]) -> Contact:
        return self._insert("contacts", draft, Contact, "create_contact")

    async def update_contact_status(self, contact_id: str, status: str) -> Contact:
        if status not in CONTACT_STATUSES:
            raise RemoteValidationError(
                f"invalid status '{status}'", operation="update_contact_status", status_code=400
            )
        row = self._update(
            "contacts", contact_id, {"status": status}, Contact, "update_contact_status"
        )
        return Contact.model_validate(row)

    async def delete_contact(self, contact_id: str) -> None:
        self._delete_where("contacts", lambda r: r["id"] == contact_id, "delete_contact")

    # --- Storage ---

    async def upload_file(
        self, data: bytes, bucket: str, filename: str, content_type: str | None = None
    ) -> UploadResult:
        try:
            self._enter("upload_file")
        except UploadError:
            raise
        except RemoteError as exc:
            raise UploadError(
                exc.message, operation="upload_file", status_code=exc.status_code
            ) from exc
        path = f"{bucket}/{filename}"
        if path in self.objects:
            raise UploadError(
                "The resource already exists", operation="upload_file", status_code=409
            )
        self.objects[path] = data
        return UploadResult(public_url=f"memory://{path}", bucket=bucket, path=filename)

    # --- Change notifications ---

    def subscribe(self, table: str, on_event: ChangeCallback) -> _Subscription:
        sub = _Subscription(self, table, on_event)
        self._subscriptions.append(sub)
        return sub
