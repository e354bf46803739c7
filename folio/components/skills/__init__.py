"""
Skills component - skill manager and grouping helper.
"""

from .component import SkillsManager, group_by_category
from .ports import SkillsRemotePort

__all__ = ["SkillsManager", "SkillsRemotePort", "group_by_category"]
