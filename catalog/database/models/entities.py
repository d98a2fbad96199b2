"""
Entity Models
--------------

Models for the reusable labels of the catalog.

Models:
    - Keyword: Free-standing search term, shared by any number of tags
    - Tag: Named label holding an ordered list of keyword ids

Tags reference keywords by id only (no foreign key, no join table): a
soft-deleted keyword simply stops resolving on the next lookup and the
relation cleanup pass prunes the dangling id.
"""

# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import List

# --- Third party imports ---
from sqlalchemy import JSON, CheckConstraint, Index, String, text
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import Mapped, mapped_column

# --- Local imports ---
from .base import Base, SoftDeleteMixin, TimestampMixin

LIVE_ROWS = text("deleted_at IS NULL")


class Keyword(Base, TimestampMixin, SoftDeleteMixin):
    """
    Represents a keyword attached to tags.

    Attributes:
        id: Opaque primary key
        name: Normalized (lower-case) keyword text

    Notes:
        - At most one live keyword per name (partial unique index)
        - Soft-deleted keywords keep their name; re-creating the name
          inserts a new record instead of resurrecting the old one
    """

    __tablename__ = "keywords"
    __table_args__ = (
        CheckConstraint("name != ''", name="ck_keyword_non_empty_name"),
        Index(
            "uq_keywords_live_name",
            "name",
            unique=True,
            sqlite_where=LIVE_ROWS,
            postgresql_where=LIVE_ROWS,
        ),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Keyword(id={self.id}, name={self.name})>"

    def __str__(self) -> str:
        return self.name


class Tag(Base, TimestampMixin, SoftDeleteMixin):
    """
    Represents a tag with its keyword associations.

    Attributes:
        id: Opaque primary key
        name: Normalized (lower-case) tag name
        keywords: Ordered keyword ids, no duplicates after any
            relation-mutating operation
    """

    __tablename__ = "tags"
    __table_args__ = (
        CheckConstraint("name != ''", name="ck_tag_non_empty_name"),
        Index(
            "uq_tags_live_name",
            "name",
            unique=True,
            sqlite_where=LIVE_ROWS,
            postgresql_where=LIVE_ROWS,
        ),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    keywords: Mapped[List[str]] = mapped_column(
        MutableList.as_mutable(JSON), nullable=False, default=list
    )

    @property
    def keyword_count(self) -> int:
        """Number of keyword associations."""
        return len(self.keywords or [])

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name}, keywords={self.keyword_count})>"

    def __str__(self) -> str:
        return self.name
