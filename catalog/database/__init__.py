#!/usr/bin/env python3
"""
Catalog Database Package
---------------------------
Storage layer of the spot catalog.

This package provides:
- Core database operations (CatalogDB)
- The document-style entity store
- Entity managers and the tag-keyword relation manager
- Public services returning entities or messages
"""

from .manager import CatalogDB
from catalog.core.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from .relationship_manager import TagKeywordRelations
from .services import CatalogServices, Message
from .store import EntityStore
from .decorators import (
    log_database_operation,
    handle_db_errors,
    validate_metadata,
)

__all__ = [
    # Main manager
    "CatalogDB",
    # Exceptions
    "ConflictError",
    "DatabaseError",
    "NotFoundError",
    "ValidationError",
    # Core modules
    "CatalogServices",
    "EntityStore",
    "Message",
    "TagKeywordRelations",
    # Decorators
    "log_database_operation",
    "handle_db_errors",
    "validate_metadata",
]
