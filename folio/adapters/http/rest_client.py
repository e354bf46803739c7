"""
REST data client for the hosted backend.

Speaks the PostgREST dialect under `{base}/rest/v1/` and the storage
API under `{base}/storage/v1/`. Requests carry the anon key, plus
the signed-in user's access token when a token provider is given.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from folio.adapters.http.change_feed import PollingChangeFeed
from folio.core.entities import (
    Contact,
    Project,
    ProjectImage,
    SiteSetting,
    Skill,
    Testimonial,
)
from folio.core.ports.remote import (
    ChangeCallback,
    RecordNotFoundError,
    RemoteError,
    RemoteValidationError,
    TransportError,
    UploadError,
    UploadResult,
)
from folio.core.ports.time import TimePort
from folio.rules.models import TablesRules

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

RETURN_ROW = {"Prefer": "return=representation"}
PROJECT_SELECT = "*,images:project_images(*)"


def error_detail(response: httpx.Response) -> str:
    """Best human-readable message from an error response."""
    detail = response.text.strip()
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error_description", "msg", "error"):
            if body.get(key):
                detail = str(body[key])
                break
    return detail[:400]


def raise_for_status(operation: str, response: httpx.Response) -> None:
    if response.is_success:
        return
    detail = error_detail(response) or response.reason_phrase
    status = response.status_code
    if status == 404:
        raise RecordNotFoundError(detail, operation=operation, status_code=status)
    if 400 <= status < 500:
        raise RemoteValidationError(detail, operation=operation, status_code=status)
    raise RemoteError(detail, operation=operation, status_code=status)


class RestDataClient:
    """RemoteDataPort over httpx."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        *,
        tables: TablesRules | None = None,
        timeout: float = 10.0,
        poll_interval: float = 5.0,
        token_provider: Callable[[], str | None] | None = None,
        clock: TimePort | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._anon_key = anon_key
        self.tables = tables or TablesRules()
        self._poll_interval = poll_interval
        self._token_provider = token_provider
        self._clock = clock
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._feeds: list[PollingChangeFeed] = []

    async def aclose(self) -> None:
        for feed in self._feeds:
            feed.unsubscribe()
        self._feeds.clear()
        await self._client.aclose()

    # --- Plumbing ---

    def _headers(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        token = self._token_provider() if self._token_provider else None
        headers = {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {token or self._anon_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Any = None,
        content: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        logger.debug("%s %s %s", operation, method, url)
        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                json=json,
                content=content,
                headers=self._headers(headers),
            )
        except httpx.TimeoutException as exc:
            raise TransportError("Request timed out", operation=operation) from exc
        except httpx.TransportError as exc:
            raise TransportError(str(exc) or type(exc).__name__, operation=operation) from exc
        except httpx.HTTPError as exc:
            raise RemoteError(str(exc) or type(exc).__name__, operation=operation) from exc
        raise_for_status(operation, response)
        return response

    async def _rest(
        self,
        operation: str,
        method: str,
        table: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        response = await self._request(
            operation,
            method,
            f"{self.base_url}/rest/v1/{table}",
            params=params,
            json=json,
            headers=headers,
        )
        if not response.content:
            return []
        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteError(
                "Response body is not JSON",
                operation=operation,
                status_code=response.status_code,
            ) from exc
        return data if isinstance(data, list) else [data]

    @staticmethod
    def _parse(model: type[M], rows: list[dict[str, Any]], operation: str) -> list[M]:
        try:
            return [model.model_validate(row) for row in rows]
        except ValidationError as exc:
            raise RemoteError(f"Malformed row: {exc}", operation=operation) from exc

    def _one(self, model: type[M], rows: list[dict[str, Any]], operation: str) -> M:
        if not rows:
            raise RecordNotFoundError("No row returned", operation=operation)
        return self._parse(model, rows[:1], operation)[0]

    async def _select(self, table: str, order: str, operation: str) -> list[dict[str, Any]]:
        return await self._rest(operation, "GET", table, params={"select": "*", "order": order})

    async def _insert(
        self, table: str, row: Mapping[str, Any], operation: str, select: str = "*"
    ) -> list[dict[str, Any]]:
        return await self._rest(
            operation, "POST", table, params={"select": select}, json=dict(row), headers=RETURN_ROW
        )

    async def _patch(
        self,
        table: str,
        row_id: str,
        patch: Mapping[str, Any],
        operation: str,
        select: str = "*",
    ) -> list[dict[str, Any]]:
        return await self._rest(
            operation,
            "PATCH",
            table,
            params={"id": f"eq.{row_id}", "select": select},
            json=dict(patch),
            headers=RETURN_ROW,
        )

    async def _delete(self, table: str, column: str, value: str, operation: str) -> None:
        await self._rest(operation, "DELETE", table, params={column: f"eq.{value}"})

    # --- Projects ---

    async def get_projects(self) -> list[Project]:
        rows = await self._rest(
            "get_projects",
            "GET",
            self.tables.projects,
            params={"select": PROJECT_SELECT, "order": "order_index.asc"},
        )
        projects = self._parse(Project, rows, "get_projects")
        for project in projects:
            project.images.sort(key=lambda image: image.order_index)
        return projects

    async def create_project(self, draft: Mapping[str, Any]) -> Project:
        rows = await self._insert(self.tables.projects, draft, "create_project", PROJECT_SELECT)
        return self._one(Project, rows, "create_project")

    async def update_project(self, project_id: str, patch: Mapping[str, Any]) -> Project:
        body = dict(patch)
        if self._clock is not None:
            body["updated_at"] = self._clock.now_utc().isoformat()
        rows = await self._patch(
            self.tables.projects, project_id, body, "update_project", PROJECT_SELECT
        )
        return self._one(Project, rows, "update_project")

    async def delete_project(self, project_id: str) -> None:
        await self._delete(self.tables.projects, "id", project_id, "delete_project")

    # --- Project images ---

    async def get_project_images(self, project_id: str) -> list[ProjectImage]:
        rows = await self._rest(
            "get_project_images",
            "GET",
            self.tables.project_images,
            params={
                "select": "*",
                "project_id": f"eq.{project_id}",
                "order": "order_index.asc",
            },
        )
        return self._parse(ProjectImage, rows, "get_project_images")

    async def add_project_image(
        self, project_id: str, image_url: str, order_index: int = 0
    ) -> ProjectImage:
        row = {"project_id": project_id, "image_url": image_url, "order_index": order_index}
        rows = await self._insert(self.tables.project_images, row, "add_project_image")
        return self._one(ProjectImage, rows, "add_project_image")

    async def delete_project_image(self, image_id: str) -> None:
        await self._delete(self.tables.project_images, "id", image_id, "delete_project_image")

    async def delete_project_images(self, project_id: str) -> None:
        await self._delete(
            self.tables.project_images, "project_id", project_id, "delete_project_images"
        )

    # --- Testimonials ---

    async def get_testimonials(self) -> list[Testimonial]:
        rows = await self._select(self.tables.testimonials, "created_at.desc", "get_testimonials")
        return self._parse(Testimonial, rows, "get_testimonials")

    async def create_testimonial(self, draft: Mapping[str, Any]) -> Testimonial:
        rows = await self._insert(self.tables.testimonials, draft, "create_testimonial")
        return self._one(Testimonial, rows, "create_testimonial")

    async def update_testimonial(
        self, testimonial_id: str, patch: Mapping[str, Any]
    ) -> Testimonial:
        rows = await self._patch(
            self.tables.testimonials, testimonial_id, patch, "update_testimonial"
        )
        return self._one(Testimonial, rows, "update_testimonial")

    async def delete_testimonial(self, testimonial_id: str) -> None:
        await self._delete(self.tables.testimonials, "id", testimonial_id, "delete_testimonial")

    # --- Skills ---

    async def get_skills(self) -> list[Skill]:
        rows = await self._select(self.tables.skills, "order_index.asc", "get_skills")
        return self._parse(Skill, rows, "get_skills")

    async def create_skill(self, draft: Mapping[str, Any]) -> Skill:
        rows = await self._insert(self.tables.skills, draft, "create_skill")
        return self._one(Skill, rows, "create_skill")

    async def update_skill(self, skill_id: str, patch: Mapping[str, Any]) -> Skill:
        rows = await self._patch(self.tables.skills, skill_id, patch, "update_skill")
        return self._one(Skill, rows, "update_skill")

    async def delete_skill(self, skill_id: str) -> None:
        await self._delete(self.tables.skills, "id", skill_id, "delete_skill")

    # --- Site settings ---

    async def get_site_settings(self) -> list[SiteSetting]:
        rows = await self._select(self.tables.site_settings, "key.asc", "get_site_settings")
        return self._parse(SiteSetting, rows, "get_site_settings")

    async def upsert_site_setting(self, key: str, value: str) -> SiteSetting:
        row: dict[str, Any] = {"key": key, "value": value}
        if self._clock is not None:
            row["updated_at"] = self._clock.now_utc().isoformat()
        rows = await self._rest(
            "upsert_site_setting",
            "POST",
            self.tables.site_settings,
            params={"on_conflict": "key", "select": "*"},
            json=row,
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
        )
        return self._one(SiteSetting, rows, "upsert_site_setting")

    async def delete_site_setting(self, key: str) -> None:
        await self._delete(self.tables.site_settings, "key", key, "delete_site_setting")

    # --- Contacts ---

    async def get_contacts(self) -> list[Contact]:
        rows = await self._select(self.tables.contacts, "created_at.desc", "get_contacts")
        return self._parse(Contact, rows, "get_contacts")

    async def create_contact(self, draft: Mapping[str, Any]) -> Contact:
        rows = await self._insert(self.tables.contacts, draft, "create_contact")
        return self._one(Contact, rows, "create_contact")

    async def update_contact_status(self, contact_id: str, status: str) -> Contact:
        rows = await self._patch(
            self.tables.contacts, contact_id, {"status": status}, "update_contact_status"
        )
        return self._one(Contact, rows, "update_contact_status")

    async def delete_contact(self, contact_id: str) -> None:
        await self._delete(self.tables.contacts, "id", contact_id, "delete_contact")

    # --- Storage ---

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"

    async def upload_file(
        self, data: bytes, bucket: str, filename: str, content_type: str | None = None
    ) -> UploadResult:
        headers = {"x-upsert": "false"}
        if content_type:
            headers["Content-Type"] = content_type
        try:
            await self._request(
                "upload_file",
                "POST",
                f"{self.base_url}/storage/v1/object/{bucket}/{filename}",
                content=data,
                headers=headers,
            )
        except RemoteError as exc:
            raise UploadError(
                exc.message, operation="upload_file", status_code=exc.status_code
            ) from exc
        return UploadResult(
            public_url=self.public_url(bucket, filename), bucket=bucket, path=filename
        )

    # --- Change notifications ---

    def subscribe(self, table: str, on_event: ChangeCallback) -> PollingChangeFeed:
        key_field = "key" if table == self.tables.site_settings else "id"

        async def fetch() -> list[Mapping[str, Any]]:
            return list(await self._select(table, f"{key_field}.asc", f"poll_{table}"))

        feed = PollingChangeFeed(
            table, fetch, on_event, interval=self._poll_interval, key_field=key_field
        ).start()
        self._feeds = [f for f in self._feeds if f.active]
        self._feeds.append(feed)
        return feed
