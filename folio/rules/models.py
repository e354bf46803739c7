from pydantic import BaseModel, ConfigDict, Field


class BackendRules(BaseModel):
    url: str | None = None
    anon_key_env: str = "FOLIO_ANON_KEY"
    timeout_seconds: float = Field(default=10.0, gt=0)
    feed_poll_seconds: float = Field(default=5.0, gt=0)

class TablesRules(BaseModel):
    projects: str = "projects"
    project_images: str = "project_images"
    testimonials: str = "testimonials"
    skills: str = "skills"
    site_settings: str = "site_settings"
    contacts: str = "contacts"

class StorageRules(BaseModel):
    project_images_bucket: str = "project-images"
    testimonial_images_bucket: str = "testimonial-images"

class UploadsRules(BaseModel):
    max_bytes: int = Field(default=5 * 1024 * 1024, gt=0)
    allowed_types: list[str] = Field(
        default_factory=lambda: ["image/png", "image/jpeg", "image/jpg", "image/webp"]
    )
    max_width: int = Field(default=1200, gt=0)
    max_height: int = Field(default=1200, gt=0)
    quality: float = Field(default=0.8, gt=0, le=1)

class NotificationsRules(BaseModel):
    enabled: bool = True
    function_path: str = "/functions/v1/send-contact-email"
    timeout_seconds: float = Field(default=10.0, gt=0)

class AdminRules(BaseModel):
    protected_prefix: str = "/admin"
    login_route: str = "/admin/login"
    landing_route: str = "/admin"

class Rules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    backend: BackendRules = Field(default_factory=BackendRules)
    tables: TablesRules = Field(default_factory=TablesRules)
    storage: StorageRules = Field(default_factory=StorageRules)
    uploads: UploadsRules = Field(default_factory=UploadsRules)
    notifications: NotificationsRules = Field(default_factory=NotificationsRules)
    admin: AdminRules = Field(default_factory=AdminRules)
    content_defaults: dict[str, str] = Field(default_factory=dict)
