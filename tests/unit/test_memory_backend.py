import pytest

from folio.adapters.memory import InMemoryAuthBackend, seed_demo
from folio.core.ports.auth import AuthError
from folio.core.ports.remote import (
    RecordNotFoundError,
    RemoteError,
    RemoteValidationError,
    UploadError,
)


@pytest.mark.asyncio
async def test_create_assigns_id_and_timestamp(backend):
    skill = await backend.create_skill({"name": "Go", "category": "Backend", "percentage": 70})

    assert skill.id
    assert skill.created_at is not None
    assert [s.name for s in await backend.get_skills()] == ["Go"]


@pytest.mark.asyncio
async def test_invalid_row_rejected(backend):
    with pytest.raises(RemoteValidationError):
        await backend.create_skill({"name": "Go", "category": "Backend", "percentage": 170})
    assert backend.rows["skills"] == {}


@pytest.mark.asyncio
async def test_update_missing_row(backend):
    with pytest.raises(RecordNotFoundError):
        await backend.update_skill("404", {"percentage": 1})


@pytest.mark.asyncio
async def test_projects_embed_images_in_order(backend):
    project = await backend.create_project(
        {"title": "P", "description": "d", "category": "Graphics"}
    )
    await backend.add_project_image(project.id, "b.png", 1)
    await backend.add_project_image(project.id, "a.png", 0)

    (loaded,) = await backend.get_projects()

    assert [image.image_url for image in loaded.images] == ["a.png", "b.png"]


@pytest.mark.asyncio
async def test_image_for_unknown_project_rejected(backend):
    with pytest.raises(RemoteValidationError):
        await backend.add_project_image("missing", "a.png")


@pytest.mark.asyncio
async def test_upsert_setting_emits_insert_then_update(backend):
    events = []
    handle = backend.subscribe("site_settings", events.append)

    await backend.upsert_site_setting("hero_tagline", "One")
    await backend.upsert_site_setting("hero_tagline", "Two")
    handle.unsubscribe()
    handle.unsubscribe()
    await backend.delete_site_setting("hero_tagline")

    assert [e.change_type for e in events] == ["INSERT", "UPDATE"]
    assert backend.subscriber_count == 0


@pytest.mark.asyncio
async def test_fail_next_fails_once(backend):
    backend.fail_next("get_skills")

    with pytest.raises(RemoteError):
        await backend.get_skills()
    assert await backend.get_skills() == []


@pytest.mark.asyncio
async def test_upload_failure_surfaces_as_upload_error(backend):
    backend.fail_next("upload_file")

    with pytest.raises(UploadError):
        await backend.upload_file(b"x", "bucket", "a.png")

    result = await backend.upload_file(b"x", "bucket", "a.png")
    assert result.public_url == "memory://bucket/a.png"
    with pytest.raises(UploadError):
        await backend.upload_file(b"y", "bucket", "a.png")


@pytest.mark.asyncio
async def test_seed_demo_populates_tables(backend):
    await seed_demo(backend)

    assert len(await backend.get_projects()) == 2
    assert len(await backend.get_skills()) == 3
    assert (await backend.get_contacts())[0].status == "new"


@pytest.mark.asyncio
async def test_memory_auth_round_trip():
    auth = InMemoryAuthBackend()
    auth.add_user("Admin@Example.com", "pw")
    events = []
    auth.on_auth_state_change(lambda event, session: events.append(event))

    session = await auth.sign_in_with_password("admin@example.com", "pw")
    assert (await auth.get_session()) == session
    assert auth.access_token == session.access_token

    await auth.sign_out()
    assert await auth.get_session() is None
    assert events == ["SIGNED_IN", "SIGNED_OUT"]


@pytest.mark.asyncio
async def test_memory_auth_rejects_wrong_password(auth_backend):
    with pytest.raises(AuthError, match="Invalid login credentials"):
        await auth_backend.sign_in_with_password("admin@example.com", "nope")
    with pytest.raises(AuthError):
        await auth_backend.sign_in_with_password("someone@example.com", "correct horse")
