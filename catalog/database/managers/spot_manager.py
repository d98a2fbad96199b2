#!/usr/bin/env python3
"""
spot_manager.py
--------------------
Manages Spot entities.

A spot is a place with contact details, an address, pictures, a rating,
a set of category names and a set of tag references.

Key Features:
    - CRUD operations for spots
    - Category names normalized and deduplicated (order kept)
    - Tag references checked against live tags and deduplicated
    - Rating constrained to 0-5
    - Contact info restricted to phone and email
    - Lookup of spots through a keyword of their tags

Usage:
    spot_mgr = SpotManager(session, logger)

    spot = spot_mgr.create({
        "name": "Blue Lagoon",
        "contact_info": {"phone": "+34 600 000 000"},
        "rating": 4.5,
        "categories": ["Beach", "beach", "Swimming"],
        "tags": [outdoor.id],
    })
    spot.categories  # ["beach", "swimming"]

    spot_mgr.find_by_keyword("Sunset")  # spots tagged with a tag holding "sunset"
"""
from typing import Any, Dict, List, Optional

from catalog.core.exceptions import NotFoundError, ValidationError
from catalog.core.validators import DataValidator
from catalog.database.decorators import handle_db_errors, log_database_operation
from catalog.database.models import Keyword, Spot, Tag
from catalog.database.store import EntityStore
from .base_manager import BaseManager

CONTACT_FIELDS = ("phone", "email")


class SpotManager(BaseManager):
    """Manages Spot table operations."""

    model_class = Spot
    display_name = "spot"

    # -------------------------------------------------------------------------
    # Field Builders
    # -------------------------------------------------------------------------

    @staticmethod
    def _contact_info(value: Optional[Dict[str, Any]]) -> Dict[str, str]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValidationError("Contact info must be a mapping")

        unknown = set(value) - set(CONTACT_FIELDS)
        if unknown:
            raise ValidationError(
                f"Unknown contact info fields: {', '.join(sorted(unknown))}"
            )

        contact: Dict[str, str] = {}
        for field in CONTACT_FIELDS:
            text = DataValidator.normalize_string(value.get(field))
            if text:
                contact[field] = text
        return contact

    def _live_tag_ids(self, values: Optional[List[Any]]) -> List[str]:
        tags = EntityStore(self.session, Tag, self.logger)
        tag_ids = DataValidator.unique_strings(
            [
                value.get("id") if isinstance(value, dict) else value
                for value in DataValidator.ensure_list(values, "tags")
            ],
            "tags",
        )
        for tag_id in tag_ids:
            if tags.find_by_id(tag_id) is None:
                raise NotFoundError("tag", tag_id)
        return tag_ids

    def _build_fields(
        self, metadata: Dict[str, Any], partial: bool = False
    ) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}

        def given(key: str) -> bool:
            return not partial or key in metadata

        if given("name"):
            fields["name"] = self._normalize_key(metadata.get("name"))
        if given("contact_info"):
            fields["contact_info"] = self._contact_info(metadata.get("contact_info"))
        if given("address"):
            fields["address"] = DataValidator.normalize_string(metadata.get("address"))
        if given("pictures"):
            fields["pictures"] = DataValidator.unique_strings(
                metadata.get("pictures"), "pictures"
            )
        if given("rating"):
            rating = DataValidator.normalize_rating(metadata.get("rating"))
            fields["rating"] = 0.0 if rating is None else rating
        if given("categories"):
            categories = DataValidator.ensure_list(
                metadata.get("categories"), "categories"
            )
            fields["categories"] = DataValidator.unique_names(
                [DataValidator.extract_name(item) for item in categories], "categories"
            )
        if given("tags"):
            fields["tags"] = self._live_tag_ids(metadata.get("tags"))
        return fields

    # -------------------------------------------------------------------------
    # Keyword Search
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("find_spots_by_keyword")
    def find_by_keyword(self, keyword: str) -> List[Spot]:
        """
        Live spots carrying a live tag that holds the live keyword.

        The path is keyword name -> keyword id -> tags listing that id ->
        spots listing those tags. Ids of deleted tags are not followed.

        Args:
            keyword: Keyword text in any case

        Returns:
            Matching spots, oldest first (may be empty)

        Raises:
            ValidationError: If the keyword is empty
            NotFoundError: If no live keyword has that name
        """
        name = DataValidator.require_name(keyword, "keyword")
        match = EntityStore(self.session, Keyword, self.logger).find_one({"name": name})
        if match is None:
            raise NotFoundError("keyword", name, field="name")

        tag_ids = {
            tag.id
            for tag in EntityStore(self.session, Tag, self.logger).find_many()
            if match.id in (tag.keywords or [])
        }
        if not tag_ids:
            return []
        return [
            spot
            for spot in self.store.find_many()
            if tag_ids.intersection(spot.tags or [])
        ]
