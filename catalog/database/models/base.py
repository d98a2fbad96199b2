"""
Base Classes and Mixins
------------------------

Foundational ORM classes for the catalog database.

Classes:
    - Base: Declarative base for all SQLAlchemy models
    - TimestampMixin: Opaque string ids plus created/updated timestamps
    - SoftDeleteMixin: Mixin providing soft delete functionality
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# --- Third party ---
from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def new_id() -> str:
    """Generate an opaque record id."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


# --- Base ORM class ---
class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Serves as the declarative base for SQLAlchemy models and provides
    access to the metadata object for table creation and migrations.
    """

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view of the mapped columns."""
        data: Dict[str, Any] = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, list):
                value = list(value)
            elif isinstance(value, dict):
                value = dict(value)
            data[column.key] = value
        return data


class TimestampMixin:
    """Opaque id primary key and bookkeeping timestamps."""

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


# --- Soft Delete ---
class SoftDeleteMixin:
    """
    Mixin providing soft delete functionality for models.

    Soft delete marks records as deleted without removing them from the
    database. A record with ``deleted_at`` set is invisible to every
    existence check but stays retrievable by raw id.

    Attributes:
        deleted_at: Timestamp when the record was soft deleted
        deleted_by: Identifier of who deleted the record
        deletion_reason: Optional explanation for the deletion
    """

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, doc="Timestamp of soft deletion"
    )
    deleted_by: Mapped[Optional[str]] = mapped_column(
        String, nullable=True, doc="User or process that deleted the record"
    )
    deletion_reason: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, doc="Reason for deletion"
    )

    @property
    def is_deleted(self) -> bool:
        """Check if the record is soft deleted."""
        return self.deleted_at is not None
