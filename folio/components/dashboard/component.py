"""
Dashboard component - record counts for the admin landing page.
"""

from __future__ import annotations

import asyncio
import logging

from folio.core.ports.remote import RemoteError

from .models import DashboardStats, StatsOutput
from .ports import DashboardSourcePort

logger = logging.getLogger(__name__)


async def run_stats(source: DashboardSourcePort) -> StatsOutput:
    """Count every table concurrently; any failed read fails the whole card."""
    try:
        projects, testimonials, skills, contacts = await asyncio.gather(
            source.get_projects(),
            source.get_testimonials(),
            source.get_skills(),
            source.get_contacts(),
        )
    except RemoteError as exc:
        logger.error("Failed to load dashboard stats: %s", exc)
        return StatsOutput(success=False, error=str(exc))

    return StatsOutput(
        success=True,
        stats=DashboardStats(
            projects=len(projects),
            testimonials=len(testimonials),
            skills=len(skills),
            contacts=len(contacts),
            unread_contacts=sum(1 for c in contacts if c.status == "new"),
        ),
    )
