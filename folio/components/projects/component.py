"""
Projects component - project list manager with owned gallery images.

Projects always re-read the whole list after a write: image rows are
joined server-side, so only a fresh read shows the final gallery.

Invariant: a project outside the gallery category owns no image rows.
Every create/update clears the image rows of such a project, whether
or not the user touched the gallery.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import ClassVar

from pydantic import ValidationError

from folio.components.records import (
    AfterWrite,
    EntityManager,
    MutationOutput,
    RemoteGateway,
    SortOrder,
    WritePolicy,
)
from folio.components.records.component import DraftInput
from folio.components.uploads import ImageUploader, UploadImageInput, UploadOutput
from folio.core.entities import GALLERY_CATEGORY, Project, ProjectDraft
from folio.core.ports.feedback import FeedbackPort

from .models import ALL_CATEGORIES, ProjectForm
from .ports import ProjectsRemotePort

logger = logging.getLogger(__name__)


class ProjectsManager(EntityManager[Project]):
    label: ClassVar[str] = "Project"
    plural: ClassVar[str] = "projects"
    draft_model = ProjectDraft
    order = SortOrder("order_index")
    policy = WritePolicy(AfterWrite.FULL_RELOAD, AfterWrite.FULL_RELOAD)

    def __init__(
        self,
        remote: ProjectsRemotePort,
        feedback: FeedbackPort | None = None,
    ) -> None:
        super().__init__(
            RemoteGateway(
                remote.get_projects,
                remote.create_project,
                remote.update_project,
                self._delete_with_images,
            ),
            feedback,
        )
        self._remote = remote

    async def create(
        self, draft: DraftInput, gallery: Sequence[str] | None = None
    ) -> MutationOutput[Project]:
        try:
            payload = self.create_payload(draft)
        except ValidationError as exc:
            return self._invalid(exc)

        async def write() -> Project:
            record = await self._remote.create_project(payload)
            await self.sync_images(record, gallery)
            return record

        return await self._mutate("create", None, write, self.policy.after_create)

    async def update(
        self,
        item_id: str,
        patch: DraftInput,
        gallery: Sequence[str] | None = None,
    ) -> MutationOutput[Project]:
        """
        Write `patch`, then reconcile images. `gallery=None` leaves the
        images of a gallery project as they are.
        """
        try:
            payload = self.update_payload(item_id, patch)
        except ValidationError as exc:
            return self._invalid(exc)

        async def write() -> Project:
            record = await self._remote.update_project(item_id, payload)
            await self.sync_images(record, gallery)
            return record

        return await self._mutate("update", item_id, write, self.policy.after_update)

    async def submit(self, form: ProjectForm) -> MutationOutput[Project]:
        """Create or update from the edit dialog."""
        try:
            draft = form.to_draft()
        except ValidationError as exc:
            return self._invalid(exc)

        gallery = form.gallery_for_submit()
        if form.editing_id is None:
            return await self.create(draft, gallery)
        return await self.update(form.editing_id, draft, gallery)

    async def sync_images(self, project: Project, gallery: Sequence[str] | None) -> None:
        """Replace the image rows of `project` with `gallery`, in order."""
        if project.category != GALLERY_CATEGORY:
            await self._remote.delete_project_images(project.id)
            return
        if gallery is None:
            return

        await self._remote.delete_project_images(project.id)
        for index, url in enumerate(gallery):
            await self._remote.add_project_image(project.id, url, index)
        logger.debug("Stored %d gallery images for project %s", len(gallery), project.id)

    async def _delete_with_images(self, project_id: str) -> None:
        await self._remote.delete_project_images(project_id)
        await self._remote.delete_project(project_id)


# --- Form uploads ---


async def upload_main_image(
    form: ProjectForm, uploader: ImageUploader, inp: UploadImageInput
) -> UploadOutput:
    """Upload the cover image; the form only changes on success."""
    result = await uploader.upload(inp)
    if result.success and result.public_url:
        form.image_url = result.public_url
    return result


async def upload_gallery_images(
    form: ProjectForm, uploader: ImageUploader, files: Iterable[UploadImageInput]
) -> list[UploadOutput]:
    """Upload several gallery images, appending each stored URL to the form."""
    results: list[UploadOutput] = []
    for sequence, inp in enumerate(files):
        result = await uploader.upload(
            UploadImageInput(
                data=inp.data,
                content_type=inp.content_type,
                bucket=inp.bucket,
                filename=inp.filename,
                prefix="gallery",
                sequence=sequence,
            )
        )
        if result.success and result.public_url:
            form.gallery.append(result.public_url)
        results.append(result)
    return results


# --- Public portfolio helpers ---


def filter_projects(projects: Iterable[Project], category: str = ALL_CATEGORIES) -> list[Project]:
    if category == ALL_CATEGORIES:
        return list(projects)
    return [project for project in projects if project.category == category]


def featured_projects(projects: Iterable[Project]) -> list[Project]:
    return [project for project in projects if project.featured]
