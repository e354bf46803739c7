"""
Skills component - ordered skill list and category grouping.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import ClassVar

from folio.components.records import (
    AfterWrite,
    EntityManager,
    RemoteGateway,
    SortOrder,
    WritePolicy,
)
from folio.core.entities import Skill, SkillDraft
from folio.core.ports.feedback import FeedbackPort

from .ports import SkillsRemotePort


class SkillsManager(EntityManager[Skill]):
    label: ClassVar[str] = "Skill"
    plural: ClassVar[str] = "skills"
    draft_model = SkillDraft
    order = SortOrder("order_index")
    policy = WritePolicy(AfterWrite.APPEND_IN_PLACE, AfterWrite.REPLACE_IN_PLACE)

    def __init__(self, remote: SkillsRemotePort, feedback: FeedbackPort | None = None) -> None:
        super().__init__(
            RemoteGateway(
                remote.get_skills,
                remote.create_skill,
                remote.update_skill,
                remote.delete_skill,
            ),
            feedback,
        )

    def categories(self) -> list[str]:
        return list(group_by_category(self.items))


def group_by_category(skills: Iterable[Skill]) -> dict[str, list[Skill]]:
    """Group skills by category; categories keep first-seen order."""
    groups: dict[str, list[Skill]] = {}
    for skill in skills:
        groups.setdefault(skill.category, []).append(skill)
    return groups
