"""
Skills component unit tests.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from folio.components.skills import SkillsManager, group_by_category
from folio.core.entities import Skill
from folio.core.ports.remote import TransportError


class MockRemote:
    def __init__(self, rows: list[Skill]) -> None:
        self.rows = {row.id: row for row in rows}
        self.fail_with: Exception | None = None

    async def get_skills(self) -> list[Skill]:
        return list(self.rows.values())

    async def create_skill(self, draft: Mapping[str, Any]) -> Skill:
        if self.fail_with:
            raise self.fail_with
        row = Skill(id=str(len(self.rows) + 1), **draft)
        self.rows[row.id] = row
        return row

    async def update_skill(self, skill_id: str, patch: Mapping[str, Any]) -> Skill:
        if self.fail_with:
            raise self.fail_with
        row = self.rows[skill_id].model_copy(update=dict(patch))
        self.rows[skill_id] = row
        return row

    async def delete_skill(self, skill_id: str) -> None:
        if self.fail_with:
            raise self.fail_with
        del self.rows[skill_id]


def react() -> Skill:
    return Skill(id="1", name="React", category="Frontend", percentage=90, order_index=0)


class TestSkillsManager:
    @pytest.mark.asyncio
    async def test_update_replaces_in_place(self) -> None:
        manager = await SkillsManager.open(MockRemote([react()]))

        result = await manager.update("1", {"percentage": 95})

        assert result.success
        assert [(s.id, s.name, s.percentage) for s in manager.items] == [("1", "React", 95)]

    @pytest.mark.asyncio
    async def test_create_appends(self) -> None:
        manager = await SkillsManager.open(MockRemote([react()]))

        await manager.create(
            {"name": "Figma", "category": "Design", "percentage": 70, "order_index": 1}
        )

        assert [s.name for s in manager.items] == ["React", "Figma"]

    @pytest.mark.asyncio
    async def test_failed_delete_changes_nothing(self) -> None:
        remote = MockRemote([react()])
        manager = await SkillsManager.open(remote)
        remote.fail_with = TransportError("timeout")

        result = await manager.delete("1")

        assert not result.success
        assert [s.id for s in manager.items] == ["1"]

    @pytest.mark.asyncio
    async def test_delete_removes_exactly_one(self) -> None:
        remote = MockRemote(
            [react(), Skill(id="2", name="Go", category="Backend", percentage=60, order_index=1)]
        )
        manager = await SkillsManager.open(remote)

        await manager.delete("1")

        assert [s.id for s in manager.items] == ["2"]


class TestGrouping:
    def test_group_by_category_keeps_order(self) -> None:
        skills = [
            Skill(id="1", name="React", category="Frontend", percentage=90),
            Skill(id="2", name="Figma", category="Design", percentage=80),
            Skill(id="3", name="CSS", category="Frontend", percentage=85),
        ]

        groups = group_by_category(skills)

        assert list(groups) == ["Frontend", "Design"]
        assert [s.name for s in groups["Frontend"]] == ["React", "CSS"]
