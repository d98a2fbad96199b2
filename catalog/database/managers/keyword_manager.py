#!/usr/bin/env python3
"""
keyword_manager.py
--------------------
Keyword registry: owns Keyword identity.

Keywords are looked up by their normalized name among live records only.
A soft-deleted keyword never blocks its name: asking for the name again
creates a brand new record.

Key Features:
    - Atomic find-or-create by normalized name
    - Live-only lookups by name and id
    - Raw id lookup that also sees soft-deleted keywords (cleanup path)
    - Soft delete, plain CRUD

Usage:
    keyword_mgr = KeywordManager(session, logger)

    sunset = keyword_mgr.find_or_create("Sunset")
    assert keyword_mgr.find_or_create("sunset").id == sunset.id

    keyword_mgr.soft_delete(sunset.id)
    keyword_mgr.find_by_id(sunset.id).deleted_at  # still there
"""
from typing import Any, Dict

from catalog.core.exceptions import NotFoundError
from catalog.core.validators import DataValidator
from catalog.database.decorators import handle_db_errors, log_database_operation
from catalog.database.models import Keyword
from .base_manager import BaseManager


class KeywordManager(BaseManager):
    """Manages Keyword records and their live-name identity."""

    model_class = Keyword
    display_name = "keyword"

    def _normalize_key(self, value: Any) -> str:
        return DataValidator.require_name(value, self.display_name)

    def _build_fields(
        self, metadata: Dict[str, Any], partial: bool = False
    ) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        if not partial or "name" in metadata:
            fields["name"] = self._normalize_key(metadata.get("name"))
        return fields

    # -------------------------------------------------------------------------
    # Registry Operations
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("find_or_create_keyword")
    def find_or_create(self, name: str) -> Keyword:
        """
        Return the live keyword with this name, creating it if needed.

        Args:
            name: Keyword text in any case

        Returns:
            Existing or newly created live Keyword

        Raises:
            ValidationError: If the name is empty after normalization
        """
        normalized = self._normalize_key(name)
        return self.store.upsert({"name": normalized})

    @handle_db_errors
    def find_by_name(self, name: str) -> Keyword:
        """
        Live keyword by name.

        Raises:
            NotFoundError: If no live keyword has that name
        """
        return self.get_by_name(name)

    @handle_db_errors
    def find_by_id(self, keyword_id: str, include_deleted: bool = True) -> Keyword:
        """
        Keyword by raw id, soft-deleted ones included by default.

        Raises:
            NotFoundError: If no record has that id
        """
        keyword = self.store.find_by_id(keyword_id, include_deleted=include_deleted)
        if keyword is None:
            raise NotFoundError(self.display_name, keyword_id)
        return keyword

    def soft_delete(self, keyword_id: str, **kwargs: Any) -> Keyword:
        """
        Soft delete a live keyword.

        Tags keep referencing the id until the next cleanup pass or sweep.

        Raises:
            NotFoundError: If absent or already soft deleted
        """
        return self.delete(keyword_id, **kwargs)
