#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the spot catalog.

Exception Hierarchy:
    Exception (built-in)
    ├── DatabaseError - Base for all storage-related errors
    │   ├── NotFoundError - Entity absent or soft deleted at lookup time
    │   └── ConflictError - Live record already holds the natural key
    └── ValidationError - Data validation failures

Usage:
    from catalog.core.exceptions import NotFoundError, ConflictError

    try:
        tag = tag_mgr.create({"name": "outdoor"})
    except ConflictError as e:
        logger.log_warning(f"Duplicate tag: {e}", {"existing_id": e.existing_id})
"""
from typing import Optional


class DatabaseError(Exception):
    """
    Base exception for storage-related errors.

    Raised when store operations fail due to connection issues,
    query errors, integrity violations, or other database problems.
    Catch this to handle any storage error, or catch the specific
    subclasses for lookups and natural-key collisions.

    Examples:
        >>> raise DatabaseError("Connection to database failed")
        >>> raise DatabaseError("Data integrity violation: duplicate entry")
    """

    pass


class NotFoundError(DatabaseError):
    """
    Exception for lookups that hit nothing live.

    Raised when the requested entity does not exist or has been
    soft deleted. Services recover it into a message result.

    Attributes:
        entity: Display name of the entity type
        key: Identifier or name that was looked up

    Examples:
        >>> raise NotFoundError("tag", "5f1c...")
        >>> raise NotFoundError("keyword", "sunset", field="name")
    """

    def __init__(self, entity: str, key: str, field: str = "id") -> None:
        self.entity = entity
        self.key = key
        self.field = field
        super().__init__(f"{entity.capitalize()} with {field} {key} not found")


class ConflictError(DatabaseError):
    """
    Exception for create/update calls that collide with a live natural key.

    Attributes:
        entity: Display name of the entity type
        key: Natural key value that collided
        existing_id: Id of the live record already holding the key

    Examples:
        >>> raise ConflictError("plan", "premium", existing_id="9a0e...")
    """

    def __init__(
        self, entity: str, key: str, existing_id: Optional[str] = None
    ) -> None:
        self.entity = entity
        self.key = key
        self.existing_id = existing_id
        message = f"{entity.capitalize()} with name: {key} already exists"
        if existing_id:
            message += f" under id: {existing_id}"
        super().__init__(message)


class ValidationError(Exception):
    """
    Exception for data validation failures.

    Raised when input data fails validation checks:
    - Missing required fields
    - Names that are empty after normalization
    - Type mismatches (e.g. non-numeric rating)

    Examples:
        >>> raise ValidationError("Required field 'name' missing or empty")
        >>> raise ValidationError("Rating must be between 0 and 5")
    """

    pass
