"""
Database Models Package
------------------------

SQLAlchemy ORM models for the catalog database.

This package provides a modular organization of database models:
- base: Base class and mixins
- entities: Keyword, Tag
- places: Plan, Spot

Usage:
    from catalog.database.models import Tag, Keyword, Spot, Plan
"""
# Base classes
from .base import Base, SoftDeleteMixin, TimestampMixin, new_id, utcnow

# Entity models
from .entities import Keyword, Tag

# Place models
from .places import Plan, Spot

__all__ = [
    # Base
    "Base",
    "SoftDeleteMixin",
    "TimestampMixin",
    "new_id",
    "utcnow",
    # Entities
    "Keyword",
    "Tag",
    # Places
    "Plan",
    "Spot",
]
