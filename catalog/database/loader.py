#!/usr/bin/env python3
"""
loader.py
--------------------
Seed import from YAML files.

A seed file may hold four top-level lists, imported in this order:

    keywords:
      - Hiking
      - camping
    tags:
      - name: Outdoor
        keywords: [Hiking, Camping, Trail]
    plans:
      - name: Weekend Escape
        description: Two nights, one spot
        price: 120
    spots:
      - name: Blue Lagoon
        address: 1 Shore Road
        contact_info: {phone: "+34 600 000 000"}
        rating: 4.5
        categories: [Beach, swimming]
        tags: [outdoor]

Everything goes through the public services, so normalization, duplicate
suppression and conflict checks apply exactly as for interactive calls.
Spot tags are given by tag name and resolved to live tag ids. Loading the
same file twice is safe: existing records are reported as skipped and
existing tags still receive any keywords they are missing.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path
from typing import Any, Dict, List, Union

# --- Third party imports ---
import yaml

# --- Local imports ---
from catalog.core.exceptions import ValidationError
from catalog.core.logging_manager import safe_logger
from catalog.core.validators import DataValidator
from .services import CatalogServices, Message

SEED_SECTIONS = ("keywords", "tags", "plans", "spots")


def read_seed(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Parse a seed file.

    Raises:
        ValidationError: If the file is not a mapping of known sections
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValidationError(f"Seed file {path} must contain a mapping")

    unknown = set(data) - set(SEED_SECTIONS)
    if unknown:
        raise ValidationError(
            f"Unknown seed sections: {', '.join(sorted(map(str, unknown)))}"
        )
    for section in SEED_SECTIONS:
        if not isinstance(data.get(section) or [], list):
            raise ValidationError(f"Seed section '{section}' must be a list")
    return data


class SeedLoader:
    """
    Imports seed data through ``CatalogServices``.

    Attributes:
        services: Public catalog services
        summary: Per-section counts of created and skipped records, and
            the messages of failed items
    """

    def __init__(self, services: CatalogServices) -> None:
        self.services = services
        self.logger = services.db.logger
        self.summary: Dict[str, Any] = {
            section: {"created": 0, "skipped": 0} for section in SEED_SECTIONS
        }
        self.summary["errors"] = []

    def _record(self, section: str, result: Any, label: Any) -> Any:
        if not isinstance(result, Message):
            self.summary[section]["created"] += 1
            return result
        if result.kind == "conflict":
            self.summary[section]["skipped"] += 1
        else:
            self.summary["errors"].append(f"{section}: {label}: {result.message}")
            safe_logger(self.logger).log_warning(
                f"Seed item rejected: {section} {label}", result.to_dict()
            )
        return result

    def load_keywords(self, items: List[Any]) -> None:
        for item in items:
            name = DataValidator.extract_name(item)
            result = self.services.keywords.create({"name": name})
            self._record("keywords", result, name)

    def load_tags(self, items: List[Any]) -> None:
        for item in items:
            payload = item if isinstance(item, dict) else {"name": item}
            result = self._record(
                "tags", self.services.tags.create(payload), payload.get("name")
            )
            if (
                isinstance(result, Message)
                and result.kind == "conflict"
                and payload.get("keywords")
            ):
                appended = self.services.tags.add_keywords(
                    result.existing_id, payload["keywords"]
                )
                if isinstance(appended, Message):
                    self.summary["errors"].append(
                        f"tags: {payload.get('name')}: {appended.message}"
                    )

    def load_plans(self, items: List[Any]) -> None:
        for item in items:
            payload = item if isinstance(item, dict) else {"name": item}
            self._record("plans", self.services.plans.create(payload), payload.get("name"))

    def _tag_ids(self, names: List[Any]) -> List[str]:
        tag_ids = []
        for name in names or []:
            tag = self.services.tags.get_by_name(DataValidator.extract_name(name))
            if isinstance(tag, Message):
                raise ValidationError(tag.message)
            tag_ids.append(tag.id)
        return tag_ids

    def load_spots(self, items: List[Any]) -> None:
        for item in items:
            payload = dict(item) if isinstance(item, dict) else {"name": item}
            try:
                payload["tags"] = self._tag_ids(payload.get("tags"))
            except ValidationError as e:
                self.summary["errors"].append(f"spots: {payload.get('name')}: {e}")
                continue
            self._record("spots", self.services.spots.create(payload), payload.get("name"))

    def load(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Import every section of an already parsed seed mapping."""
        self.load_keywords(data.get("keywords") or [])
        self.load_tags(data.get("tags") or [])
        self.load_plans(data.get("plans") or [])
        self.load_spots(data.get("spots") or [])

        counts = {"errors": len(self.summary["errors"])}
        for section in SEED_SECTIONS:
            for outcome, count in self.summary[section].items():
                counts[f"{section}_{outcome}"] = count
        safe_logger(self.logger).log_summary("seed_loaded", counts)
        return self.summary


def load_seed_file(services: CatalogServices, path: Union[str, Path]) -> Dict[str, Any]:
    """
    Import a YAML seed file.

    Args:
        services: Public catalog services
        path: Seed file path

    Returns:
        Summary of created/skipped records and errors
    """
    return SeedLoader(services).load(read_seed(path))
