#!/usr/bin/env python3
"""
relationship_manager.py
-----------------------
Maintains the Tag to Keyword many-to-many association.

Tags hold an ordered list of Keyword ids (weak references, no foreign
keys). This module is the only writer of that list: it resolves names to
live keywords, suppresses duplicate ids, and prunes ids whose keyword has
been soft deleted or has disappeared.

Key Features:
    - Append keywords by name with find-or-create resolution
    - Duplicate suppression against the tag and within one request
    - Removal of a single keyword from a single tag
    - Per-id dangling reference cleanup (independent, idempotent)
    - Reconciliation sweep over one or every live tag

Usage Patterns:
    Append (e.g., tag "outdoor" gets ["Hiking", "hiking", "Camping"]):
        >>> relations = TagKeywordRelations(session, logger)
        >>> tag, candidates = relations.add_keywords(tag.id, ["Hiking", "hiking", "Camping"])
        >>> len(tag.keywords)
        2

    Cleanup (run after the append is committed, one id per transaction):
        >>> relations.prune_dangling(tag.id, [keyword_id])

    Sweep (maintenance):
        >>> relations.sweep(dry_run=True)
        {'tags_scanned': 3, 'tags_changed': 1, 'references_pruned': 1, 'dry_run': True}

Notes:
    - add_keywords does not clean up; the caller schedules prune_dangling
      once the append has been persisted
    - Keywords created while resolving names are kept even if the id turns
      out to be a duplicate
    - Concurrent appends on the same tag can interleave; the next cleanup
      pass or sweep reconciles the list
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, Iterable, List, Optional, Tuple

# --- Third party imports ---
from sqlalchemy.orm import Session

# --- Local imports ---
from catalog.core.exceptions import NotFoundError
from catalog.core.logging_manager import CatalogLogger, safe_logger
from catalog.core.validators import DataValidator
from catalog.database.decorators import (
    DatabaseOperation,
    handle_db_errors,
    log_database_operation,
)
from catalog.database.managers.keyword_manager import KeywordManager
from catalog.database.models import Keyword, Tag
from catalog.database.store import EntityStore


class TagKeywordRelations:
    """
    Resolves, appends, removes and prunes keyword references on tags.

    Attributes:
        session: SQLAlchemy session (unit of work owned by the caller)
        logger: Optional logger
        keywords: Keyword registry used for name resolution
        tags: Store bound to the tags table
    """

    def __init__(self, session: Session, logger: Optional[CatalogLogger] = None):
        self.session = session
        self.logger = logger
        self.keywords = KeywordManager(session, logger)
        self.tags: EntityStore[Tag] = EntityStore(session, Tag, logger)
        self._keyword_store: EntityStore[Keyword] = EntityStore(
            session, Keyword, logger
        )

    def _live_tag(self, tag_id: str) -> Tag:
        tag = self.tags.find_by_id(tag_id)
        if tag is None:
            raise NotFoundError("tag", tag_id)
        return tag

    # -------------------------------------------------------------------------
    # Append / Remove
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("add_keywords")
    def add_keywords(
        self, tag_id: str, requested: Iterable[Any]
    ) -> Tuple[Tag, List[str]]:
        """
        Append keywords to a live tag by name.

        Names are resolved in request order through find-or-create. A
        resolved id is skipped when the tag already holds it or when an
        earlier name in the same request resolved to it.

        Args:
            tag_id: Id of a live tag
            requested: List of names, or of mappings carrying a ``name`` key

        Returns:
            Tuple of (tag with the new keyword list, ids to check for
            dangling references)

        Raises:
            NotFoundError: If the tag is absent or soft deleted
            ValidationError: If ``requested`` is not a list or any name is empty
        """
        tag = self._live_tag(tag_id)

        names = [
            DataValidator.require_name(DataValidator.extract_name(item), "keyword")
            for item in DataValidator.ensure_list(requested, "keywords")
        ]

        current = list(tag.keywords or [])
        accumulator: List[str] = []
        for name in names:
            keyword = self.keywords.find_or_create(name)
            if keyword.id in current or keyword.id in accumulator:
                continue
            accumulator.append(keyword.id)

        if accumulator:
            tag.keywords = current + accumulator
            self.session.flush()

        safe_logger(self.logger).log_debug(
            f"Appended keywords to tag: {tag.name}",
            {
                "tag_id": tag.id,
                "requested": len(names),
                "appended": len(accumulator),
            },
        )
        return tag, list(tag.keywords)

    @handle_db_errors
    @log_database_operation("remove_keyword")
    def remove_keyword(self, tag_id: str, keyword_name: str) -> Tag:
        """
        Remove one keyword, by name, from one live tag.

        Other tags referencing the same keyword are untouched.

        Raises:
            NotFoundError: If the keyword has no live record, or the tag is
                absent or soft deleted
        """
        keyword = self.keywords.find_by_name(keyword_name)
        tag = self.tags.pull_from_array({"id": tag_id}, "keywords", keyword.id)
        if tag is None:
            raise NotFoundError("tag", tag_id)
        return tag

    # -------------------------------------------------------------------------
    # Cleanup
    # -------------------------------------------------------------------------

    def _is_dangling(self, keyword_id: str) -> bool:
        keyword = self._keyword_store.find_by_id(keyword_id, include_deleted=True)
        return keyword is None or keyword.deleted_at is not None

    def prune_dangling(self, tag_id: str, keyword_ids: Iterable[str]) -> int:
        """
        Pull ids of soft-deleted or missing keywords from a live tag.

        Each id is looked up by raw id, bypassing the live filter. The pull
        is conditioned on the tag still being live, so a tag deleted in the
        meantime is left alone.

        Args:
            tag_id: Tag to clean
            keyword_ids: Ids to check

        Returns:
            Number of ids pulled
        """
        pruned = 0
        with DatabaseOperation(self.logger, "prune_dangling", {"tag_id": tag_id}):
            for keyword_id in keyword_ids:
                if not self._is_dangling(keyword_id):
                    continue
                tag = self.tags.find_by_id(tag_id)
                if tag is None or keyword_id not in tag.keywords:
                    continue
                if self.tags.pull_from_array({"id": tag_id}, "keywords", keyword_id):
                    pruned += 1
        return pruned

    def sweep(self, tag_id: Optional[str] = None, dry_run: bool = False) -> Dict[str, Any]:
        """
        Reconcile dangling keyword references across live tags.

        Args:
            tag_id: Restrict the sweep to one tag
            dry_run: Report without writing

        Returns:
            Summary with tags scanned, tags changed and references pruned

        Raises:
            NotFoundError: If ``tag_id`` is given and not a live tag
        """
        tags = [self._live_tag(tag_id)] if tag_id else self.tags.find_many()

        summary: Dict[str, Any] = {
            "tags_scanned": 0,
            "tags_changed": 0,
            "references_pruned": 0,
            "dry_run": dry_run,
        }
        with DatabaseOperation(self.logger, "sweep_keywords", {"dry_run": dry_run}):
            for tag in tags:
                summary["tags_scanned"] += 1
                dangling = [
                    kid
                    for kid in dict.fromkeys(tag.keywords or [])
                    if self._is_dangling(kid)
                ]
                if not dangling:
                    continue
                summary["tags_changed"] += 1
                if dry_run:
                    summary["references_pruned"] += len(dangling)
                    continue
                summary["references_pruned"] += self.prune_dangling(tag.id, dangling)
        safe_logger(self.logger).log_summary("sweep_keywords", summary)
        return summary
