"""
Dashboard component - admin landing statistics.
"""

from .component import run_stats
from .models import DashboardStats, StatsOutput
from .ports import DashboardSourcePort

__all__ = ["run_stats", "DashboardStats", "StatsOutput", "DashboardSourcePort"]
