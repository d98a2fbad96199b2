#!/usr/bin/env python3
"""
plan_manager.py
--------------------
Manages Plan entities.

Plans are independent records with the same soft-delete discipline as
every other entity. Plan names are trimmed but keep their case.
"""
from typing import Any, Dict

from catalog.core.validators import DataValidator
from catalog.database.models import Plan
from .base_manager import BaseManager


class PlanManager(BaseManager):
    """Manages Plan table operations."""

    model_class = Plan
    display_name = "plan"

    def _build_fields(
        self, metadata: Dict[str, Any], partial: bool = False
    ) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        if not partial or "name" in metadata:
            fields["name"] = self._normalize_key(metadata.get("name"))
        if not partial or "description" in metadata:
            fields["description"] = DataValidator.normalize_string(
                metadata.get("description")
            )
        if not partial or "price" in metadata:
            fields["price"] = DataValidator.normalize_float(metadata.get("price"))
        return fields
