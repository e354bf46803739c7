"""
Projects component - project manager, edit form and portfolio filters.
"""

from folio.core.entities import PROJECT_CATEGORIES

from .component import (
    ProjectsManager,
    featured_projects,
    filter_projects,
    upload_gallery_images,
    upload_main_image,
)
from .models import ALL_CATEGORIES, ProjectForm, parse_technologies
from .ports import ProjectsRemotePort

PROJECT_FILTERS: tuple[str, ...] = (ALL_CATEGORIES, *PROJECT_CATEGORIES)

__all__ = [
    "ProjectsManager",
    "ProjectForm",
    "ProjectsRemotePort",
    "parse_technologies",
    "filter_projects",
    "featured_projects",
    "upload_main_image",
    "upload_gallery_images",
    "ALL_CATEGORIES",
    "PROJECT_FILTERS",
]
