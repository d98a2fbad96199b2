#!/usr/bin/env python3
"""
store.py
--------------------
Entity store adapter: a uniform, document-style interface over one table.

Every read and write goes through an ``EntityStore`` bound to a session and
a model class. Filters are plain ``{column: value}`` mappings and implicitly
carry the live discriminator (``deleted_at IS NULL``) unless the caller
passes ``include_deleted=True``.

Key Features:
    - find_by_id / find_one / find_many with soft-delete filtering
    - insert of a plain document
    - atomic upsert (find-or-create) backed by a partial unique index
    - filtered update and filtered array pull
    - soft delete marking (records are never physically removed)

Usage:
    store = EntityStore(session, Keyword, logger)

    keyword = store.upsert({"name": "sunset"})
    store.pull_from_array({"id": tag.id}, "keywords", keyword.id)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

# --- Third party imports ---
from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

# --- Local imports ---
from catalog.core.exceptions import DatabaseError
from catalog.core.logging_manager import CatalogLogger, safe_logger
from .models import Base, utcnow

T = TypeVar("T", bound=Base)

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class EntityStore(Generic[T]):
    """
    Document-style access to a single model's table.

    Attributes:
        session: SQLAlchemy session (unit of work owned by the caller)
        model_class: Mapped class this store reads and writes
        logger: Optional logger
    """

    def __init__(
        self,
        session: Session,
        model_class: Type[T],
        logger: Optional[CatalogLogger] = None,
    ) -> None:
        self.session = session
        self.model_class = model_class
        self.logger = logger

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _select(self, filters: Optional[Dict[str, Any]], include_deleted: bool):
        stmt = select(self.model_class)
        if filters:
            stmt = stmt.filter_by(**filters)
        if not include_deleted:
            stmt = stmt.where(self.model_class.deleted_at.is_(None))
        return stmt

    def find_by_id(self, entity_id: str, include_deleted: bool = False) -> Optional[T]:
        """
        Get a record by primary key.

        Args:
            entity_id: Opaque record id
            include_deleted: Return soft-deleted records too

        Returns:
            Record or None
        """
        if not entity_id:
            return None
        entity = self.session.get(self.model_class, entity_id)
        if entity is None:
            return None
        if not include_deleted and entity.deleted_at is not None:
            return None
        return entity

    def find_one(
        self, filters: Dict[str, Any], include_deleted: bool = False
    ) -> Optional[T]:
        """First record matching ``filters``."""
        stmt = self._select(filters, include_deleted).limit(1)
        return self.session.scalars(stmt).first()

    def find_many(
        self,
        filters: Optional[Dict[str, Any]] = None,
        include_deleted: bool = False,
        order_by: Optional[str] = "created_at",
    ) -> List[T]:
        """
        All records matching ``filters``.

        Args:
            filters: Column equality filters
            include_deleted: Return soft-deleted records too
            order_by: Column name to order by (insertion order by default)
        """
        stmt = self._select(filters, include_deleted)
        if order_by and hasattr(self.model_class, order_by):
            stmt = stmt.order_by(getattr(self.model_class, order_by), self.model_class.id)
        return list(self.session.scalars(stmt).all())

    def count(self, include_deleted: bool = False) -> int:
        """Number of (live) records."""
        stmt = select(func.count()).select_from(self.model_class)
        if not include_deleted:
            stmt = stmt.where(self.model_class.deleted_at.is_(None))
        return self.session.scalar(stmt) or 0

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert(self, doc: Dict[str, Any]) -> T:
        """
        Insert a new record from a plain document.

        Raises:
            IntegrityError: If a unique index rejects the row
        """
        entity = self.model_class(**doc)
        self.session.add(entity)
        self.session.flush()
        return entity

    def upsert(
        self, filters: Dict[str, Any], update: Optional[Dict[str, Any]] = None
    ) -> T:
        """
        Atomically find the live record matching ``filters`` or create it.

        A single ``INSERT ... ON CONFLICT DO NOTHING`` against the partial
        unique index on live rows decides the race; the live row is then
        read back. Two concurrent calls for the same key end up with the
        same record.

        Args:
            filters: Natural-key columns; must match a unique index
                restricted to ``deleted_at IS NULL``
            update: Extra columns written only when a row is inserted

        Returns:
            The existing or newly created live record

        Raises:
            DatabaseError: If the dialect has no conflict-ignoring insert,
                or the row cannot be read back
        """
        dialect = self.session.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise DatabaseError(f"Upsert not supported for dialect: {dialect}")

        values = {**filters, **(update or {})}
        stmt = (
            insert(self.model_class)
            .values(**values)
            .on_conflict_do_nothing(
                index_elements=list(filters.keys()),
                index_where=self.model_class.deleted_at.is_(None),
            )
        )
        self.session.execute(stmt)

        entity = self.find_one(filters)
        if entity is None:
            raise DatabaseError(
                f"Upsert of {self.model_class.__name__} {filters} produced no live row"
            )
        return entity

    def update_one(
        self,
        filters: Dict[str, Any],
        update: Dict[str, Any],
        include_deleted: bool = False,
    ) -> Optional[T]:
        """
        Set fields on the first record matching ``filters``.

        Returns:
            The updated record, or None if nothing matched
        """
        entity = self.find_one(filters, include_deleted=include_deleted)
        if entity is None:
            return None

        for key, value in update.items():
            if not hasattr(self.model_class, key):
                raise DatabaseError(
                    f"{self.model_class.__name__} has no field '{key}'"
                )
            setattr(entity, key, value)
        self.session.flush()
        return entity

    def pull_from_array(
        self,
        filters: Dict[str, Any],
        field: str,
        value: Any,
        include_deleted: bool = False,
    ) -> Optional[T]:
        """
        Remove every occurrence of ``value`` from an array field.

        Args:
            filters: Record filter (live records only by default)
            field: Name of a JSON list column
            value: Element to remove

        Returns:
            The matched record (changed or not), or None if nothing matched
        """
        entity = self.find_one(filters, include_deleted=include_deleted)
        if entity is None:
            return None

        current = list(getattr(entity, field) or [])
        remaining = [item for item in current if item != value]
        if len(remaining) != len(current):
            setattr(entity, field, remaining)
            self.session.flush()
            safe_logger(self.logger).log_debug(
                f"Pulled value from {self.model_class.__tablename__}.{field}",
                {"id": entity.id, "value": value, "removed": len(current) - len(remaining)},
            )
        return entity

    def soft_delete(
        self,
        filters: Dict[str, Any],
        deleted_by: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Optional[T]:
        """
        Mark the live record matching ``filters`` as deleted.

        Returns:
            The deleted record, or None if no live record matched
        """
        return self.update_one(
            filters,
            {
                "deleted_at": utcnow(),
                "deleted_by": deleted_by,
                "deletion_reason": reason,
            },
        )
