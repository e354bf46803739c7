"""
Dashboard component models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DashboardStats:
    projects: int = 0
    testimonials: int = 0
    skills: int = 0
    contacts: int = 0
    unread_contacts: int = 0


@dataclass(frozen=True)
class StatsOutput:
    success: bool
    stats: DashboardStats = DashboardStats()
    error: str | None = None
