#!/usr/bin/env python3
"""
managers package
--------------------
Entity managers for the catalog database.

Each manager handles the lifecycle of one entity type, inheriting the
live-filtered lookups, conflict-checked creation and soft delete from
BaseManager.

Available Managers:
    BaseManager: Abstract base class with the lifecycle contract
    KeywordManager: Keyword registry (find-or-create by normalized name)
    TagManager: Manages Tag entities
    PlanManager: Manages Plan entities
    SpotManager: Manages Spot entities

Usage:
    from catalog.database.managers import KeywordManager, TagManager

    keyword_mgr = KeywordManager(session, logger)
    tag_mgr = TagManager(session, logger)
"""
from .base_manager import BaseManager
from .keyword_manager import KeywordManager
from .tag_manager import TagManager
from .plan_manager import PlanManager
from .spot_manager import SpotManager

__all__ = [
    "BaseManager",
    "KeywordManager",
    "TagManager",
    "PlanManager",
    "SpotManager",
]
