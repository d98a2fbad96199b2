#!/usr/bin/env python3
"""
tag_manager.py
--------------------
Manages Tag entities.

Tag names are natural keys: they are stored normalized and at most one
live tag holds a given name. The keyword list is owned by
``TagKeywordRelations``; this manager never writes it directly.

Key Features:
    - CRUD operations for tags
    - Automatic tag name normalization
    - Keyword id resolution for display

Usage:
    tag_mgr = TagManager(session, logger)

    outdoor = tag_mgr.create({"name": "Outdoor"})
    tag_mgr.get_by_name("OUTDOOR").id == outdoor.id

    tag_mgr.keywords_of(outdoor.id)
"""
from typing import Any, Dict, List

from catalog.core.validators import DataValidator
from catalog.database.decorators import handle_db_errors
from catalog.database.models import Keyword, Tag
from catalog.database.store import EntityStore
from .base_manager import BaseManager


class TagManager(BaseManager):
    """
    Manages Tag table operations.

    Tags are named labels. Each tag holds an ordered list of keyword ids
    maintained through the relation manager.
    """

    model_class = Tag
    display_name = "tag"

    def _normalize_key(self, value: Any) -> str:
        return DataValidator.require_name(value, self.display_name)

    def _build_fields(
        self, metadata: Dict[str, Any], partial: bool = False
    ) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        if not partial or "name" in metadata:
            fields["name"] = self._normalize_key(metadata.get("name"))
        return fields

    @handle_db_errors
    def keywords_of(self, tag_id: str) -> List[Keyword]:
        """
        Live keywords referenced by a live tag, in tag order.

        Dangling ids (soft-deleted or missing keywords) are skipped.
        """
        tag = self.get(tag_id)
        store = EntityStore(self.session, Keyword, self.logger)
        resolved = [store.find_by_id(keyword_id) for keyword_id in tag.keywords]
        return [keyword for keyword in resolved if keyword is not None]
