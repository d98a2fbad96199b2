#!/usr/bin/env python3
"""
validators.py
--------------------
Data validation and normalization utilities for all catalog operations.

Every name used as a natural key (tag, keyword, category) passes through
``normalize`` before it is stored or used in a query, so a caller supplying
"Ocean" matches a record stored as "ocean".
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .exceptions import ValidationError


def normalize(raw: Any) -> Optional[str]:
    """
    Case-fold and trim a natural-key string.

    Args:
        raw: User-supplied name

    Returns:
        Lower-cased, stripped name, or None if nothing is left
    """
    if not isinstance(raw, str):
        return None
    value = raw.strip().lower()
    return value or None


class DataValidator:
    """Centralized data validation for database operations."""

    @staticmethod
    def validate_required_fields(
        data: Dict[str, Any], required_fields: List[str]
    ) -> None:
        """
        Validate that required fields are present and non-empty.

        Args:
            data: Data dictionary to validate
            required_fields: List of required field names

        Raises:
            ValidationError: If validation fails
        """
        DataValidator.require_mapping(data)
        for field in required_fields:
            if field not in data or not data[field]:
                raise ValidationError(f"Required field '{field}' missing or empty")

    @staticmethod
    def require_mapping(data: Any, label: str = "payload") -> Dict[str, Any]:
        """
        Reject anything but a mapping.

        Raises:
            ValidationError: If ``data`` is not a dict
        """
        if not isinstance(data, dict):
            raise ValidationError(
                f"Expected a mapping for {label}, got {type(data).__name__}"
            )
        return data

    @staticmethod
    def ensure_list(value: Any, field: str) -> List[Any]:
        """
        Accept a list (or tuple) of items; None means an empty list.

        A bare string is rejected rather than split into characters.

        Raises:
            ValidationError: If ``value`` is a scalar or a mapping
        """
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValidationError(
                f"'{field}' must be a list, got {type(value).__name__}"
            )
        return list(value)

    @staticmethod
    def normalize_name(value: Any) -> Optional[str]:
        """Normalize a natural-key name (see ``normalize``)."""
        return normalize(value)

    @staticmethod
    def require_name(value: Any, display_name: str) -> str:
        """
        Normalize a natural-key name, rejecting empty results.

        Args:
            value: Raw name
            display_name: Entity label for the error message

        Returns:
            Normalized name

        Raises:
            ValidationError: If the name is empty after normalization
        """
        name = normalize(value)
        if name is None:
            raise ValidationError(f"{display_name.capitalize()} name cannot be empty")
        return name

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """
        Trim a free-text value without changing its case.

        Args:
            value: Value to normalize

        Returns:
            Stripped string or None
        """
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def normalize_float(value: Any) -> Optional[float]:
        """
        Convert value to float.

        Args:
            value: Value to convert

        Returns:
            Float value or None

        Raises:
            ValidationError: If the value is not numeric
        """
        if value is None:
            return None
        if isinstance(value, bool):
            raise ValidationError(f"Cannot convert boolean '{value}' to number")
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Cannot convert '{value}' to number") from e

    @staticmethod
    def normalize_rating(value: Any) -> Optional[float]:
        """Convert a spot rating, enforcing the 0-5 range."""
        rating = DataValidator.normalize_float(value)
        if rating is not None and not 0 <= rating <= 5:
            raise ValidationError(f"Rating must be between 0 and 5, got {rating}")
        return rating

    @staticmethod
    def unique_names(values: Any, field: str = "names") -> List[str]:
        """
        Normalize a list of names, dropping empties and repeats.

        First occurrence wins, so the caller's order is preserved.
        """
        names: List[str] = []
        for value in DataValidator.ensure_list(values, field):
            name = normalize(value)
            if name and name not in names:
                names.append(name)
        return names

    @staticmethod
    def unique_strings(values: Any, field: str = "values") -> List[str]:
        """Trim a list of strings, dropping empties and repeats (order kept)."""
        items: List[str] = []
        for value in DataValidator.ensure_list(values, field):
            text = DataValidator.normalize_string(value)
            if text and text not in items:
                items.append(text)
        return items

    @staticmethod
    def extract_name(item: Any) -> Any:
        """
        Pull the name out of a name-bearing record.

        Accepts plain strings or mappings with a ``name`` key
        (e.g. ``{"name": "Hiking"}``).
        """
        if isinstance(item, dict):
            return item.get("name")
        return item
