"""
Place Models
------------

Models for spots and the plans that organize them.

Models:
    - Plan: Independent catalog plan, soft-delete only
    - Spot: A place with contact info, pictures, rating, categories and tags

Spot categories are normalized names; spot tags are weak references to
Tag ids stored as a JSON list.
"""

# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, List, Optional

# --- Third party imports ---
from sqlalchemy import JSON, CheckConstraint, Float, Index, String, Text
from sqlalchemy.ext.mutable import MutableDict, MutableList
from sqlalchemy.orm import Mapped, mapped_column

# --- Local imports ---
from .base import Base, SoftDeleteMixin, TimestampMixin
from .entities import LIVE_ROWS


class Plan(Base, TimestampMixin, SoftDeleteMixin):
    """
    Represents a catalog plan.

    Attributes:
        id: Opaque primary key
        name: Plan name (trimmed, case preserved)
        description: Optional free text
        price: Optional price
    """

    __tablename__ = "plans"
    __table_args__ = (
        CheckConstraint("name != ''", name="ck_plan_non_empty_name"),
        Index(
            "uq_plans_live_name",
            "name",
            unique=True,
            sqlite_where=LIVE_ROWS,
            postgresql_where=LIVE_ROWS,
        ),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    def __repr__(self) -> str:
        return f"<Plan(id={self.id}, name={self.name})>"


class Spot(Base, TimestampMixin, SoftDeleteMixin):
    """
    Represents a place in the catalog.

    Attributes:
        id: Opaque primary key
        name: Spot name (trimmed, case preserved)
        contact_info: Mapping with optional ``phone`` and ``email``
        address: Street address
        pictures: Picture URLs
        rating: Rating between 0 and 5
        categories: Normalized category names (set semantics, ordered)
        tags: Tag ids (set semantics, ordered)
    """

    __tablename__ = "spots"
    __table_args__ = (
        CheckConstraint("name != ''", name="ck_spot_non_empty_name"),
        Index(
            "uq_spots_live_name",
            "name",
            unique=True,
            sqlite_where=LIVE_ROWS,
            postgresql_where=LIVE_ROWS,
        ),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_info: Mapped[Dict[str, Any]] = mapped_column(
        MutableDict.as_mutable(JSON), nullable=False, default=dict
    )
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    pictures: Mapped[List[str]] = mapped_column(
        MutableList.as_mutable(JSON), nullable=False, default=list
    )
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    categories: Mapped[List[str]] = mapped_column(
        MutableList.as_mutable(JSON), nullable=False, default=list
    )
    tags: Mapped[List[str]] = mapped_column(
        MutableList.as_mutable(JSON), nullable=False, default=list
    )

    def __repr__(self) -> str:
        return f"<Spot(id={self.id}, name={self.name})>"
