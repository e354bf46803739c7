"""
Settings component unit tests.

Tests for the settings cache, change-feed subscription lifecycle and
the admin settings editor.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest

from folio.components.settings import (
    DeleteSettingInput,
    SettingsEditor,
    SettingsSnapshot,
    SettingsStore,
    UpsertSettingInput,
    build_settings_map,
)
from folio.core.entities import SiteSetting
from folio.core.ports.remote import ChangeEvent, ChangeType, RemoteError, TransportError

# --- Mock Implementations ---


class MockFeedHandle:
    def __init__(self, table: str, callback: Callable[[ChangeEvent], None]) -> None:
        self.table = table
        self.callback = callback
        self.unsubscribe_count = 0

    @property
    def active(self) -> bool:
        return self.unsubscribe_count == 0

    def unsubscribe(self) -> None:
        self.unsubscribe_count += 1


class MockSettingsSource:
    """In-memory settings table with an inspectable change feed."""

    def __init__(self, rows: list[SiteSetting] | None = None) -> None:
        self.rows = list(rows or [])
        self.fail_with: Exception | None = None
        self.fetch_count = 0
        self.handles: list[MockFeedHandle] = []
        self.gates: list[asyncio.Future[list[SiteSetting]]] = []

    async def get_site_settings(self) -> list[SiteSetting]:
        self.fetch_count += 1
        if self.gates:
            return await self.gates.pop(0)
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.rows)

    def subscribe(self, table: str, on_event: Callable[[ChangeEvent], None]) -> MockFeedHandle:
        handle = MockFeedHandle(table, on_event)
        self.handles.append(handle)
        return handle

    def emit(self, change_type: ChangeType = "UPDATE") -> None:
        for handle in self.handles:
            if handle.active:
                event = ChangeEvent(table=handle.table, change_type=change_type)
                handle.callback(event)

    # admin side
    async def upsert_site_setting(self, key: str, value: str) -> SiteSetting:
        if self.fail_with is not None:
            raise self.fail_with
        self.rows = [r for r in self.rows if r.key != key]
        row = SiteSetting(key=key, value=value)
        self.rows.append(row)
        return row

    async def delete_site_setting(self, key: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.rows = [r for r in self.rows if r.key != key]


class RecordingFeedback:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    @property
    def errors(self) -> list[str]:
        return [m for level, m in self.messages if level == "error"]


def setting(key: str, value: str) -> SiteSetting:
    return SiteSetting(key=key, value=value)


# --- Fixtures ---


@pytest.fixture
def source() -> MockSettingsSource:
    return MockSettingsSource()


@pytest.fixture
def store(source: MockSettingsSource) -> SettingsStore:
    return SettingsStore(source)


# --- Map building ---


class TestBuildSettingsMap:
    def test_maps_key_to_value(self) -> None:
        rows = [setting("a", "1"), setting("b", "2")]
        assert build_settings_map(rows) == {"a": "1", "b": "2"}

    def test_duplicate_keys_last_write_wins(self) -> None:
        rows = [setting("a", "old"), setting("a", "new")]
        assert build_settings_map(rows) == {"a": "new"}


# --- Fetch and replace ---


class TestFetchAndReplace:
    def test_initial_state_is_empty_and_not_loaded(self, store: SettingsStore) -> None:
        snap = store.snapshot
        assert dict(snap.values) == {}
        assert snap.loaded is False

    @pytest.mark.asyncio
    async def test_fetch_populates_map_and_marks_loaded(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        source.rows = [setting("hero_main_heading_suffix", "Jane")]

        result = await store.fetch_and_replace()

        assert result.success is True
        assert dict(store.snapshot.values) == {"hero_main_heading_suffix": "Jane"}
        assert store.snapshot.loaded is True

    @pytest.mark.asyncio
    async def test_fetch_replaces_rather_than_merges(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        source.rows = [setting("a", "1"), setting("b", "2")]
        await store.fetch_and_replace()

        source.rows = [setting("b", "3")]
        await store.fetch_and_replace()

        assert dict(store.snapshot.values) == {"b": "3"}

    @pytest.mark.asyncio
    async def test_empty_table_is_loaded_not_loading(
        self, store: SettingsStore
    ) -> None:
        await store.fetch_and_replace()

        assert store.snapshot.loaded is True
        assert len(store.snapshot) == 0

    @pytest.mark.asyncio
    async def test_failure_marks_loaded_and_keeps_previous_map(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        source.rows = [setting("a", "1")]
        await store.fetch_and_replace()

        source.fail_with = TransportError("connection reset", operation="get_site_settings")
        result = await store.fetch_and_replace()

        assert result.success is False
        assert "connection reset" in (result.error or "")
        assert store.snapshot.loaded is True
        assert dict(store.snapshot.values) == {"a": "1"}

    @pytest.mark.asyncio
    async def test_first_fetch_failure_still_unblocks_rendering(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        source.fail_with = RemoteError("boom")

        await store.fetch_and_replace()

        assert store.snapshot.loaded is True
        assert dict(store.snapshot.values) == {}

    @pytest.mark.asyncio
    async def test_last_completed_read_wins(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        loop = asyncio.get_running_loop()
        first: asyncio.Future[list[SiteSetting]] = loop.create_future()
        second: asyncio.Future[list[SiteSetting]] = loop.create_future()
        source.gates = [first, second]

        t1 = asyncio.create_task(store.fetch_and_replace())
        t2 = asyncio.create_task(store.fetch_and_replace())
        await asyncio.sleep(0)

        # second request completes first, first request completes last
        second.set_result([setting("k", "from-second")])
        await t2
        first.set_result([setting("k", "from-first"), setting("extra", "x")])
        await t1

        assert dict(store.snapshot.values) == {"k": "from-first", "extra": "x"}

    @pytest.mark.asyncio
    async def test_listeners_receive_snapshots(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        seen: list[SettingsSnapshot] = []
        remove = store.add_listener(seen.append)
        source.rows = [setting("a", "1")]

        await store.fetch_and_replace()
        remove()
        await store.fetch_and_replace()

        assert len(seen) == 1
        assert seen[0].values["a"] == "1"

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_sync(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        def broken(_: SettingsSnapshot) -> None:
            raise RuntimeError("render failed")

        store.add_listener(broken)
        source.rows = [setting("a", "1")]

        result = await store.fetch_and_replace()

        assert result.success is True
        assert store.snapshot.values["a"] == "1"


# --- Subscription lifecycle ---


class TestSubscription:
    def test_subscribe_opens_one_feed_on_settings_table(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        store.subscribe()

        assert len(source.handles) == 1
        assert source.handles[0].table == "site_settings"
        assert store.subscribed is True

    def test_subscribe_twice_leaves_exactly_one_active_feed(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        store.subscribe()
        store.subscribe()

        active = [h for h in source.handles if h.active]
        assert len(source.handles) == 2
        assert len(active) == 1
        assert source.handles[0].unsubscribe_count == 1
        assert active[0] is source.handles[1]

    def test_unsubscribe_without_feed_is_noop(self, store: SettingsStore) -> None:
        store.unsubscribe()

        assert store.subscribed is False
        assert store.snapshot.loaded is False

    def test_unsubscribe_twice_closes_handle_once(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        store.subscribe()
        store.unsubscribe()
        store.unsubscribe()

        assert source.handles[0].unsubscribe_count == 1
        assert store.subscribed is False

    @pytest.mark.asyncio
    async def test_change_event_triggers_refetch(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        store.subscribe()
        source.rows = [setting("hero_tagline", "Designer")]

        source.emit("UPDATE")
        await store.wait_idle()

        assert source.fetch_count == 1
        assert store.snapshot.values == {"hero_tagline": "Designer"}

    @pytest.mark.asyncio
    async def test_events_after_unsubscribe_are_ignored(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        store.subscribe()
        store.unsubscribe()

        source.emit("INSERT")
        await store.wait_idle()

        assert source.fetch_count == 0


# --- Teardown ---


class TestTeardown:
    @pytest.mark.asyncio
    async def test_teardown_resets_loaded_and_closes_feed(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        source.rows = [setting("a", "1")]
        store.subscribe()
        await store.fetch_and_replace()

        store.teardown()

        assert store.snapshot.loaded is False
        assert dict(store.snapshot.values) == {}
        assert source.handles[0].unsubscribe_count == 1

    @pytest.mark.asyncio
    async def test_completion_after_teardown_is_discarded(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        gate: asyncio.Future[list[SiteSetting]] = asyncio.get_running_loop().create_future()
        source.gates = [gate]

        pending = asyncio.create_task(store.fetch_and_replace())
        await asyncio.sleep(0)
        store.teardown()
        gate.set_result([setting("a", "1")])
        result = await pending

        assert result.stale is True
        assert store.snapshot.loaded is False
        assert dict(store.snapshot.values) == {}


# --- Snapshot defaults ---


class TestSnapshotDefaults:
    def test_get_prefers_cached_value(self) -> None:
        snap = SettingsSnapshot(
            values={"hero_tagline": "Painter"}, loaded=True, defaults={"hero_tagline": "Dev"}
        )
        assert snap.get("hero_tagline") == "Painter"

    def test_get_falls_back_to_default_for_missing_or_blank(self) -> None:
        snap = SettingsSnapshot(
            values={"contact_email": ""},
            loaded=True,
            defaults={"contact_email": "hello@example.com", "hero_tagline": "Dev"},
        )
        assert snap.get("contact_email") == "hello@example.com"
        assert snap.get("hero_tagline") == "Dev"
        assert snap.get("unknown", "fallback") == "fallback"
        assert "hero_tagline" not in snap

    @pytest.mark.asyncio
    async def test_store_applies_configured_defaults(self, source: MockSettingsSource) -> None:
        store = SettingsStore(source, defaults={"hero_cta_primary_text": "Let's Work Together"})

        await store.fetch_and_replace()

        assert store.snapshot.get("hero_cta_primary_text") == "Let's Work Together"
        assert dict(store.snapshot.values) == {}


# --- Admin editor ---


class TestSettingsEditor:
    @pytest.mark.asyncio
    async def test_upsert_trims_and_refreshes_store(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        feedback = RecordingFeedback()
        editor = SettingsEditor(source, store, feedback)

        result = await editor.upsert(UpsertSettingInput(key="  contact_phone ", value=" +1 555 "))

        assert result.success is True
        assert result.setting is not None
        assert result.setting.key == "contact_phone"
        assert store.snapshot.values == {"contact_phone": "+1 555"}
        assert feedback.errors == []

    @pytest.mark.asyncio
    async def test_upsert_requires_key_and_value(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        feedback = RecordingFeedback()
        editor = SettingsEditor(source, store, feedback)

        result = await editor.upsert(UpsertSettingInput(key=" ", value=""))

        assert result.success is False
        assert {e.field for e in result.errors} == {"key", "value"}
        assert source.fetch_count == 0
        assert feedback.errors

    @pytest.mark.asyncio
    async def test_upsert_rejects_keys_with_spaces(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        editor = SettingsEditor(source, store)

        result = await editor.upsert(UpsertSettingInput(key="hero tagline", value="x"))

        assert result.success is False
        assert result.errors[0].code == "invalid_key"

    @pytest.mark.asyncio
    async def test_failed_upsert_leaves_store_untouched(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        source.rows = [setting("a", "1")]
        await store.fetch_and_replace()
        feedback = RecordingFeedback()
        editor = SettingsEditor(source, store, feedback)
        source.fail_with = RemoteError("denied", status_code=403)

        result = await editor.upsert(UpsertSettingInput(key="b", value="2"))

        assert result.success is False
        assert store.snapshot.values == {"a": "1"}
        assert feedback.errors == ["Failed to save setting"]

    @pytest.mark.asyncio
    async def test_delete_removes_key_after_refresh(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        source.rows = [setting("a", "1"), setting("b", "2")]
        await store.fetch_and_replace()
        editor = SettingsEditor(source, store)

        result = await editor.delete(DeleteSettingInput(key="a"))

        assert result.success is True
        assert store.snapshot.values == {"b": "2"}

    @pytest.mark.asyncio
    async def test_rows_sorted_by_key(
        self, source: MockSettingsSource, store: SettingsStore
    ) -> None:
        source.rows = [setting("z", "1"), setting("a", "2")]
        editor = SettingsEditor(source, store)

        rows = await editor.rows()

        assert [r.key for r in rows] == ["a", "z"]
