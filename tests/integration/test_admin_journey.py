"""
End-to-end admin journey over the in-memory backend: session restore,
route guard, settings editing, project/image management, the public
contact form and the inbox.
"""

import io

import pytest
import pytest_asyncio
from PIL import Image

from folio.adapters.memory import seed_demo
from folio.app_shell.context import AppContext
from folio.app_shell.router import GuardOutcome
from folio.components.projects import ProjectForm, upload_gallery_images, upload_main_image
from folio.components.settings import UpsertSettingInput
from folio.components.uploads import UploadImageInput


def png(size=(2000, 1000)):
    buf = io.BytesIO()
    Image.new("RGB", size, color="blue").save(buf, format="PNG")
    return buf.getvalue()


@pytest_asyncio.fixture
async def ctx(rules, backend, auth_backend, feedback):
    await seed_demo(backend)
    context = AppContext.in_memory(rules, backend, auth_backend, feedback=feedback)
    await context.startup()
    yield context
    await context.shutdown()


@pytest.mark.asyncio
async def test_startup_loads_settings_with_defaults(ctx):
    snapshot = ctx.settings.snapshot

    assert snapshot.loaded
    assert snapshot.get("hero_main_heading_suffix") == "Jane"
    assert snapshot.get("footer_brand_name") == "Portfolio"
    assert "footer_brand_name" not in snapshot
    assert ctx.settings.subscribed


@pytest.mark.asyncio
async def test_guard_redirects_until_signed_in(ctx):
    assert (await ctx.guard.resolve("/admin")).outcome is GuardOutcome.REDIRECT

    await ctx.auth.sign_in("admin@example.com", "correct horse")

    assert (await ctx.guard.resolve("/admin/projects")).outcome is GuardOutcome.ALLOW


@pytest.mark.asyncio
async def test_setting_edit_reaches_public_snapshot(ctx, backend):
    await ctx.auth.sign_in("admin@example.com", "correct horse")

    result = await ctx.settings_editor.upsert(
        UpsertSettingInput(key="hero_tagline", value="  Designer & Developer  ")
    )
    await ctx.settings.wait_idle()

    assert result.success
    assert ctx.settings.snapshot.get("hero_tagline") == "Designer & Developer"

    # a write made elsewhere arrives through the change feed
    await backend.upsert_site_setting("contact_email", "new@example.com")
    await ctx.settings.wait_idle()
    assert ctx.settings.snapshot.get("contact_email") == "new@example.com"


@pytest.mark.asyncio
async def test_gallery_project_lifecycle(ctx, backend, rules):
    console = await ctx.open_admin()
    assert len(console.projects) == 2

    bucket = rules.storage.project_images_bucket
    form = ProjectForm(
        title="Album Covers",
        description="Cover art series",
        category="Graphics",
        technologies="Photoshop, Illustrator",
    )
    cover = await upload_main_image(
        form, ctx.uploader, UploadImageInput(png(), "image/png", bucket, "cover.png")
    )
    gallery = await upload_gallery_images(
        form,
        ctx.uploader,
        [UploadImageInput(png(), "image/png", bucket) for _ in range(2)],
    )

    assert cover.success and all(result.success for result in gallery)
    assert form.image_url.startswith("memory://project-images/main-")

    created = await console.projects.submit(form)

    assert created.success
    stored = next(p for p in console.projects.items if p.title == "Album Covers")
    assert stored.technologies == ["Photoshop", "Illustrator"]
    assert [image.image_url for image in stored.images] == form.gallery

    # uploaded images were shrunk to the configured bounding box
    with Image.open(io.BytesIO(backend.objects[form.image_url.removeprefix("memory://")])) as img:
        assert img.size == (1200, 600)

    deleted = await console.projects.delete(stored.id)

    assert deleted.success
    assert console.projects.get(stored.id) is None
    assert not [r for r in backend.rows["project_images"].values() if r["project_id"] == stored.id]


@pytest.mark.asyncio
async def test_contact_form_to_inbox(ctx):
    result = await ctx.contact_form.submit(
        {
            "name": "Riley",
            "email": "riley@example.com",
            "subject": "Collaboration",
            "message": "Let's build something.",
        }
    )
    assert result.success
    assert ctx.notifier.count == 1

    console = await ctx.open_admin()
    await console.contacts.reload()
    assert console.contacts.new_count == 2

    newest = next(c for c in console.contacts.items if c.email == "riley@example.com")
    opened = await console.contacts.open_message(newest.id)
    assert opened.status == "read"
    await console.contacts.archive(newest.id)

    stats = await ctx.stats()
    assert stats.stats.contacts == 2
    assert stats.stats.unread_contacts == 1
    assert [c.id for c in console.contacts.by_status("archived")] == [newest.id]


@pytest.mark.asyncio
async def test_remote_failure_leaves_cache_and_reports(ctx, backend, feedback):
    console = await ctx.open_admin()
    before = console.skills.items
    backend.fail_next("create_skill")

    result = await console.skills.create({"name": "Rust", "category": "Backend", "percentage": 40})

    assert not result.success
    assert console.skills.items == before
    assert feedback.errors


@pytest.mark.asyncio
async def test_shutdown_releases_feeds(rules, backend, auth_backend):
    context = AppContext.in_memory(rules, backend, auth_backend)
    await context.startup()
    await context.open_admin()
    assert backend.subscriber_count == 1

    await context.shutdown()

    assert backend.subscriber_count == 0
    assert context.admin is None
    assert not context.settings.snapshot.loaded
