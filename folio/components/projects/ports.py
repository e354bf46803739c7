"""
Projects component port definitions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from folio.core.entities import Project, ProjectImage


class ProjectsRemotePort(Protocol):
    """Project rows plus the image rows they own."""

    async def get_projects(self) -> list[Project]: ...
    async def create_project(self, draft: Mapping[str, Any]) -> Project: ...
    async def update_project(self, project_id: str, patch: Mapping[str, Any]) -> Project: ...
    async def delete_project(self, project_id: str) -> None: ...

    async def add_project_image(
        self, project_id: str, image_url: str, order_index: int = 0
    ) -> ProjectImage: ...
    async def delete_project_images(self, project_id: str) -> None: ...
