"""
Skills component port definitions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from folio.core.entities import Skill


class SkillsRemotePort(Protocol):
    async def get_skills(self) -> list[Skill]: ...
    async def create_skill(self, draft: Mapping[str, Any]) -> Skill: ...
    async def update_skill(self, skill_id: str, patch: Mapping[str, Any]) -> Skill: ...
    async def delete_skill(self, skill_id: str) -> None: ...
