"""
Dashboard component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from folio.core.entities import Contact, Project, Skill, Testimonial


class DashboardSourcePort(Protocol):
    async def get_projects(self) -> list[Project]: ...
    async def get_testimonials(self) -> list[Testimonial]: ...
    async def get_skills(self) -> list[Skill]: ...
    async def get_contacts(self) -> list[Contact]: ...
