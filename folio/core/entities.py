"""
Domain entities for the portfolio site.

Records mirror the rows held by the hosted backend (projects,
project_images, testimonials, skills, site_settings, contacts).
The backend is authoritative; these models are what the client
caches and what it sends back as drafts.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Enums / Literals ---
ProjectCategory = Literal["Frontend", "Mobile", "UI/UX", "Graphics"]
ContactStatus = Literal["new", "read", "replied", "archived"]

PROJECT_CATEGORIES: tuple[str, ...] = ("Frontend", "Mobile", "UI/UX", "Graphics")
CONTACT_STATUSES: tuple[str, ...] = ("new", "read", "replied", "archived")
GALLERY_CATEGORY = "Graphics"


class Record(BaseModel):
    """Base for rows read from the backend. Unknown columns are ignored."""

    model_config = ConfigDict(extra="ignore")

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)


# --- Settings ---

class SiteSetting(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    key: str
    value: str
    updated_at: datetime | None = None


# --- Projects ---

class ProjectImage(Record):
    project_id: str
    image_url: str
    order_index: int = 0
    created_at: datetime | None = None

    @field_validator("project_id", mode="before")
    @classmethod
    def _coerce_project_id(cls, value: Any) -> str:
        return str(value)


class Project(Record):
    title: str
    description: str = ""
    category: ProjectCategory
    technologies: list[str] = Field(default_factory=list)
    live_url: str | None = None
    github_url: str | None = None
    image_url: str | None = None
    featured: bool = False
    order_index: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    images: list[ProjectImage] = Field(default_factory=list)

    @field_validator("images", mode="before")
    @classmethod
    def _images_default(cls, value: Any) -> Any:
        # embedded selects return null when no rows are joined
        return value or []

    @property
    def is_gallery(self) -> bool:
        return self.category == GALLERY_CATEGORY


class Testimonial(Record):
    name: str
    position: str = ""
    company: str = ""
    content: str
    image_url: str | None = None
    rating: int = Field(default=5, ge=1, le=5)
    featured: bool = False
    created_at: datetime | None = None


class Skill(Record):
    name: str
    category: str
    percentage: int = Field(ge=0, le=100)
    order_index: int = 0
    created_at: datetime | None = None


class Contact(Record):
    name: str
    email: str
    subject: str
    message: str
    status: ContactStatus = "new"
    created_at: datetime | None = None


# --- Drafts (write payloads) ---

class Draft(BaseModel):
    """Write payload sent to the backend as a JSON row."""

    model_config = ConfigDict(extra="forbid")

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ProjectDraft(Draft):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    category: ProjectCategory
    technologies: list[str] = Field(default_factory=list)
    live_url: str | None = None
    github_url: str | None = None
    image_url: str | None = None
    featured: bool = False
    order_index: int = 0


class TestimonialDraft(Draft):
    name: str = Field(min_length=1)
    position: str = ""
    company: str = ""
    content: str = Field(min_length=1)
    image_url: str | None = None
    rating: int = Field(default=5, ge=1, le=5)
    featured: bool = False


class SkillDraft(Draft):
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    percentage: int = Field(ge=0, le=100)
    order_index: int = 0


class ContactDraft(Draft):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    subject: str = Field(min_length=1)
    message: str = Field(min_length=1)
    status: ContactStatus = "new"

    @field_validator("email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        local, _, domain = value.partition("@")
        if not local or "." not in domain:
            raise ValueError("must be a valid email address")
        return value


# --- Auth ---

class Principal(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    email: str


class AuthSession(BaseModel):
    principal: Principal
    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None
