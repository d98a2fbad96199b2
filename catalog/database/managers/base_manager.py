#!/usr/bin/env python3
"""
base_manager.py
--------------------
Base manager providing the uniform lifecycle contract for every entity.

Key Features:
    - Live-filtered lookups by id and by natural key
    - Conflict-checked creation keyed on the live natural key
    - Live-filtered find-and-replace-fields updates
    - One-way soft delete (records are never physically removed)
    - Consistent error types (NotFoundError, ConflictError, ValidationError)

Usage:
    Subclass BaseManager for each entity type and set:
    - model_class: Mapped class
    - display_name: Label used in messages
    - _normalize_key(): How the natural key is normalized
    - _build_fields(): How a payload maps to column values

Example:
    class PlanManager(BaseManager):
        model_class = Plan
        display_name = "plan"

        def _build_fields(self, metadata, partial=False):
            ...
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

# --- Third party imports ---
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

# --- Local imports ---
from catalog.core.exceptions import ConflictError, NotFoundError, ValidationError
from catalog.core.logging_manager import CatalogLogger, safe_logger
from catalog.core.validators import DataValidator
from catalog.database.decorators import (
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from catalog.database.store import EntityStore


class BaseManager(ABC):
    """
    Abstract base manager providing common lifecycle operations.

    Attributes:
        session: SQLAlchemy session for database operations
        logger: Optional logger for operation tracking
        store: EntityStore bound to ``model_class``
    """

    model_class: Type[Any]
    display_name: str = "entity"
    name_field: str = "name"

    def __init__(self, session: Session, logger: Optional[CatalogLogger] = None):
        """
        Initialize the manager.

        Args:
            session: SQLAlchemy session
            logger: Optional logger for operation tracking
        """
        self.session = session
        self.logger = logger
        self.store: EntityStore = EntityStore(session, self.model_class, logger)

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def _normalize_key(self, value: Any) -> str:
        """Normalize the natural key; free-text names keep their case."""
        name = DataValidator.normalize_string(value)
        if name is None:
            raise ValidationError(
                f"{self.display_name.capitalize()} name cannot be empty"
            )
        return name

    @abstractmethod
    def _build_fields(
        self, metadata: Dict[str, Any], partial: bool = False
    ) -> Dict[str, Any]:
        """Map a payload to column values (all fields, or only given ones)."""

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @handle_db_errors
    def get_all(self) -> List[Any]:
        """All live records, oldest first."""
        return self.store.find_many()

    @handle_db_errors
    def get(self, entity_id: str) -> Any:
        """
        Live record by id.

        Raises:
            NotFoundError: If absent or soft deleted
        """
        entity = self.store.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.display_name, entity_id)
        return entity

    @handle_db_errors
    def get_by_name(self, name: str) -> Any:
        """
        Live record by natural key.

        Raises:
            NotFoundError: If no live record has that name
        """
        key = self._normalize_key(name)
        entity = self.store.find_one({self.name_field: key})
        if entity is None:
            raise NotFoundError(self.display_name, key, field="name")
        return entity

    @handle_db_errors
    def exists(self, name: str) -> bool:
        """Check whether a live record holds the natural key."""
        try:
            key = self._normalize_key(name)
        except ValidationError:
            return False
        return self.store.find_one({self.name_field: key}) is not None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _insert_unique(self, fields: Dict[str, Any]) -> Any:
        """
        Insert after checking the live natural key.

        The partial unique index settles races the pre-check misses.

        Raises:
            ConflictError: If a live record already holds the key
        """
        key = fields[self.name_field]
        existing = self.store.find_one({self.name_field: key})
        if existing is not None:
            raise ConflictError(self.display_name, key, existing.id)

        try:
            entity = self.store.insert(fields)
        except IntegrityError as e:
            raise ConflictError(self.display_name, key) from e

        safe_logger(self.logger).log_debug(
            f"Created {self.display_name}: {key}", {"id": entity.id}
        )
        return entity

    @handle_db_errors
    @validate_metadata(["name"])
    def create(self, metadata: Dict[str, Any]) -> Any:
        """
        Create a new record.

        Raises:
            ValidationError: If the payload has no usable name
            ConflictError: If a live record with the same name exists
        """
        return self._insert_unique(self._build_fields(metadata))

    @handle_db_errors
    @validate_metadata([])
    def update(self, entity_id: str, metadata: Dict[str, Any]) -> Any:
        """
        Replace the given fields on a live record.

        Raises:
            ValidationError: If the payload is not a mapping or a field is invalid
            NotFoundError: If the record is absent or soft deleted
            ConflictError: If a rename collides with another live record
        """
        entity = self.get(entity_id)
        fields = self._build_fields(metadata, partial=True)

        new_key = fields.get(self.name_field)
        if new_key is not None and new_key != getattr(entity, self.name_field):
            clash = self.store.find_one({self.name_field: new_key})
            if clash is not None and clash.id != entity.id:
                raise ConflictError(self.display_name, new_key, clash.id)

        try:
            updated = self.store.update_one({"id": entity.id}, fields)
        except IntegrityError as e:
            raise ConflictError(self.display_name, str(new_key)) from e

        safe_logger(self.logger).log_debug(
            f"Updated {self.display_name}", {"id": entity.id, "fields": list(fields)}
        )
        return updated

    @handle_db_errors
    @log_database_operation("soft_delete")
    def delete(
        self,
        entity_id: str,
        deleted_by: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Any:
        """
        Soft delete a live record.

        Raises:
            NotFoundError: If the record is absent or already deleted
        """
        entity = self.store.soft_delete(
            {"id": entity_id}, deleted_by=deleted_by, reason=reason
        )
        if entity is None:
            raise NotFoundError(self.display_name, entity_id)

        safe_logger(self.logger).log_debug(
            f"Soft deleted {self.display_name}: {getattr(entity, self.name_field)}",
            {"id": entity.id, "deleted_by": deleted_by, "reason": reason},
        )
        return entity
