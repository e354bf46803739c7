"""
Projects component models: the admin edit form.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from folio.core.entities import GALLERY_CATEGORY, Project, ProjectDraft

ALL_CATEGORIES = "All"


def parse_technologies(text: str) -> list[str]:
    """'React, TypeScript ,, Tailwind' -> ['React', 'TypeScript', 'Tailwind']"""
    return [part.strip() for part in text.split(",") if part.strip()]


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class ProjectForm:
    """
    Editable state behind the project dialog.

    Field values are kept as the user typed them; `to_draft()` turns
    them into a validated write payload.
    """

    title: str = ""
    description: str = ""
    category: str = "Frontend"
    technologies: str = ""
    live_url: str = ""
    github_url: str = ""
    image_url: str = ""
    featured: bool = False
    order_index: int = 0
    gallery: list[str] = field(default_factory=list)
    editing_id: str | None = None

    @classmethod
    def from_project(cls, project: Project) -> ProjectForm:
        images = sorted(project.images, key=lambda image: image.order_index)
        return cls(
            title=project.title,
            description=project.description,
            category=project.category,
            technologies=", ".join(project.technologies),
            live_url=project.live_url or "",
            github_url=project.github_url or "",
            image_url=project.image_url or "",
            featured=project.featured,
            order_index=project.order_index,
            gallery=[image.image_url for image in images],
            editing_id=project.id,
        )

    @property
    def is_gallery(self) -> bool:
        return self.category == GALLERY_CATEGORY

    def to_draft(self) -> ProjectDraft:
        """Raises pydantic.ValidationError for missing or invalid fields."""
        return ProjectDraft(
            title=self.title.strip(),
            description=self.description.strip(),
            category=self.category,  # type: ignore[arg-type]
            technologies=parse_technologies(self.technologies),
            live_url=_blank_to_none(self.live_url),
            github_url=_blank_to_none(self.github_url),
            image_url=_blank_to_none(self.image_url),
            featured=self.featured,
            order_index=self.order_index,
        )

    def gallery_for_submit(self) -> list[str]:
        """Gallery URLs to store; always empty outside the gallery category."""
        return list(self.gallery) if self.is_gallery else []

    def add_gallery_url(self, url: str) -> bool:
        url = url.strip()
        if not url:
            return False
        self.gallery.append(url)
        return True

    def remove_gallery_image(self, index: int) -> None:
        if 0 <= index < len(self.gallery):
            del self.gallery[index]
