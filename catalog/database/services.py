#!/usr/bin/env python3
"""
services.py
--------------------
Public operations of the catalog, one per lifecycle or relation method.

Every operation runs in its own ``session_scope`` and returns either the
entity (a detached snapshot) or a ``Message``. Exceptions raised by the
managers never cross this boundary:

    NotFoundError    -> Message(kind="not_found")
    ConflictError    -> Message(kind="conflict", existing_id=...)
    DatabaseError    -> Message(kind="error", error=<cause>)
    ValidationError  -> Message(kind="error", error=<cause>)

Usage:
    services = CatalogServices(db)

    tag = services.tags.create({"name": "Outdoor"})
    tag = services.tags.add_keywords(tag.id, ["Hiking", "hiking", "Camping"])
    result = services.keywords.get_by_name("nope")
    if isinstance(result, Message):
        print(result.kind, result.message)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import asdict, dataclass
from functools import wraps
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type, Union

# --- Third party imports ---
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

# --- Local imports ---
from catalog.core.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from catalog.core.logging_manager import safe_logger
from .manager import CatalogDB
from .managers import BaseManager, KeywordManager, PlanManager, SpotManager, TagManager
from .models import Keyword, Spot, Tag
from .relationship_manager import TagKeywordRelations

UNEXPECTED_ERROR = "An unexpected error occurred on the database"


@dataclass
class Message:
    """
    Non-entity result of a public operation.

    Attributes:
        message: Human readable description
        kind: One of ``not_found``, ``conflict``, ``error``
        error: Underlying cause for ``error`` results
        existing_id: Id of the colliding record for ``conflict`` results
    """

    message: str
    kind: str = "error"
    error: Optional[str] = None
    existing_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


def returns_message(function: Callable) -> Callable:
    """
    Decorator translating manager exceptions into ``Message`` results.

    Storage and validation failures are logged; lookups that hit nothing
    and natural-key conflicts are ordinary outcomes and are not.
    """

    @wraps(function)
    def wrapper(self, *args, **kwargs):
        try:
            return function(self, *args, **kwargs)
        except NotFoundError as e:
            return Message(str(e), kind="not_found")
        except ConflictError as e:
            return Message(str(e), kind="conflict", existing_id=e.existing_id)
        except (DatabaseError, ValidationError, SQLAlchemyError) as e:
            safe_logger(self.logger).log_error(
                e, {"operation": f"{self.label}.{function.__name__}"}
            )
            return Message(UNEXPECTED_ERROR, kind="error", error=str(e))

    return wrapper


class EntityService:
    """
    Uniform lifecycle operations for one entity type.

    Subclasses set ``manager_class`` and ``label`` (plural, for messages).
    """

    manager_class: Type[BaseManager]
    label: str = "entities"

    def __init__(self, db: CatalogDB) -> None:
        self.db = db
        self.logger = db.logger

    def _manager(self, session: Session) -> Any:
        return self.manager_class(session, self.logger)

    @returns_message
    def get_all(self) -> Union[List[Any], Message]:
        """All live records, or a not-found message when there are none."""
        with self.db.session_scope() as session:
            entities = self._manager(session).get_all()
        if not entities:
            return Message(f"There are no {self.label} available", kind="not_found")
        return entities

    @returns_message
    def get_by_id(self, entity_id: str) -> Any:
        with self.db.session_scope() as session:
            return self._manager(session).get(entity_id)

    @returns_message
    def get_by_name(self, name: str) -> Any:
        with self.db.session_scope() as session:
            return self._manager(session).get_by_name(name)

    @returns_message
    def create(self, payload: Dict[str, Any]) -> Any:
        with self.db.session_scope() as session:
            return self._manager(session).create(payload)

    @returns_message
    def update(self, entity_id: str, payload: Dict[str, Any]) -> Any:
        with self.db.session_scope() as session:
            return self._manager(session).update(entity_id, payload)

    @returns_message
    def soft_delete(
        self,
        entity_id: str,
        deleted_by: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Any:
        with self.db.session_scope() as session:
            return self._manager(session).delete(
                entity_id, deleted_by=deleted_by, reason=reason
            )


class KeywordService(EntityService):
    """Keyword operations, including find-or-create by name."""

    manager_class = KeywordManager
    label = "keywords"

    @returns_message
    def find_or_create(self, name: str) -> Union[Keyword, Message]:
        with self.db.session_scope() as session:
            return self._manager(session).find_or_create(name)

    @returns_message
    def find_by_id(self, keyword_id: str) -> Union[Keyword, Message]:
        """Raw lookup that also returns soft-deleted keywords."""
        with self.db.session_scope() as session:
            return self._manager(session).find_by_id(keyword_id)


class TagService(EntityService):
    """Tag operations and the tag-keyword relation."""

    manager_class = TagManager
    label = "tags"

    def _append(
        self, session: Session, tag_id: str, keywords: Iterable[Any]
    ) -> Tuple[Tag, List[str]]:
        relations = TagKeywordRelations(session, self.logger)
        return relations.add_keywords(tag_id, keywords)

    @returns_message
    def create(self, payload: Dict[str, Any]) -> Union[Tag, Message]:
        """
        Create a tag, optionally with initial keyword names.

        ``payload["keywords"]`` goes through the same resolution and
        duplicate suppression as ``add_keywords``.
        No cleanup pass is scheduled: every id was resolved live in this
        same transaction.
        """
        keywords = payload.get("keywords") if isinstance(payload, dict) else None
        with self.db.session_scope() as session:
            tag = self._manager(session).create(payload)
            if keywords:
                tag, _ = self._append(session, tag.id, keywords)
        return tag

    @returns_message
    def add_keywords(
        self, tag_id: str, keywords: Iterable[Any]
    ) -> Union[Tag, Message]:
        """
        Append keywords to a live tag by name, then clean up dangling ids.

        The returned tag reflects the append only. The cleanup pass runs
        after the append is committed, one transaction per keyword id,
        inline or on the cleanup workers.
        """
        with self.db.session_scope() as session:
            tag, candidates = self._append(session, tag_id, keywords)

        self.db.schedule_keyword_cleanup(tag.id, candidates)
        return tag

    @returns_message
    def remove_keyword(self, tag_id: str, keyword_name: str) -> Union[Tag, Message]:
        with self.db.session_scope() as session:
            relations = TagKeywordRelations(session, self.logger)
            return relations.remove_keyword(tag_id, keyword_name)

    @returns_message
    def keywords_of(self, tag_id: str) -> Union[List[Keyword], Message]:
        with self.db.session_scope() as session:
            return self._manager(session).keywords_of(tag_id)

    @returns_message
    def sweep(
        self, tag_id: Optional[str] = None, dry_run: bool = False
    ) -> Union[Dict[str, Any], Message]:
        """Prune references to soft-deleted or missing keywords."""
        with self.db.session_scope() as session:
            relations = TagKeywordRelations(session, self.logger)
            return relations.sweep(tag_id=tag_id, dry_run=dry_run)


class PlanService(EntityService):
    manager_class = PlanManager
    label = "plans"


class SpotService(EntityService):
    manager_class = SpotManager
    label = "spots"

    @returns_message
    def find_by_keyword(self, keyword: str) -> Union[List[Spot], Message]:
        """Live spots reachable through a keyword of their tags."""
        with self.db.session_scope() as session:
            spots = self._manager(session).find_by_keyword(keyword)
        if not spots:
            return Message(
                f"There are no spots available for keyword {keyword}",
                kind="not_found",
            )
        return spots


class CatalogServices:
    """
    Entry point bundling the per-entity services over one database.

    Attributes:
        keywords: KeywordService
        tags: TagService
        plans: PlanService
        spots: SpotService
    """

    def __init__(self, db: CatalogDB) -> None:
        self.db = db
        self.keywords = KeywordService(db)
        self.tags = TagService(db)
        self.plans = PlanService(db)
        self.spots = SpotService(db)

    def for_entity(self, name: str) -> EntityService:
        """Service by plural entity name (``keywords``, ``tags``...)."""
        service = getattr(self, name, None)
        if not isinstance(service, EntityService):
            raise ValueError(f"Unknown entity type: {name}")
        return service


__all__ = [
    "CatalogServices",
    "EntityService",
    "KeywordService",
    "Message",
    "PlanService",
    "SpotService",
    "TagService",
    "returns_message",
]
