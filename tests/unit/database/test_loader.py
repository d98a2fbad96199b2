"""
test_loader.py
--------------
Tests for YAML seed import.
"""
import pytest

from catalog.core.exceptions import ValidationError
from catalog.database.loader import load_seed_file, read_seed


class TestReadSeed:
    """Seed file parsing and shape checks."""

    def test_reads_sections(self, seed_file):
        data = read_seed(seed_file)
        assert set(data) == {"keywords", "tags", "plans", "spots"}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert read_seed(path) == {}

    def test_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- hiking\n- camping\n")
        with pytest.raises(ValidationError, match="mapping"):
            read_seed(path)

    def test_rejects_unknown_section(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("categories: [beach]\n")
        with pytest.raises(ValidationError, match="categories"):
            read_seed(path)

    def test_rejects_non_list_section(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("tags: outdoor\n")
        with pytest.raises(ValidationError, match="must be a list"):
            read_seed(path)


class TestLoadSeedFile:
    """Import through the public services."""

    def test_summary(self, services, seed_file):
        summary = load_seed_file(services, seed_file)

        assert summary["keywords"] == {"created": 1, "skipped": 1}
        assert summary["tags"] == {"created": 2, "skipped": 0}
        assert summary["plans"] == {"created": 2, "skipped": 0}
        assert summary["spots"] == {"created": 1, "skipped": 0}
        assert summary["errors"] == []

    def test_tag_keywords_deduplicated(self, services, seed_file):
        load_seed_file(services, seed_file)

        outdoor = services.tags.get_by_name("outdoor")
        names = [k.name for k in services.tags.keywords_of(outdoor.id)]
        assert names == ["hiking", "camping"]

        food = services.tags.get_by_name("food")
        assert [k.name for k in services.tags.keywords_of(food.id)] == ["tapas", "wine"]

    def test_spot_tags_resolved_by_name(self, services, seed_file):
        load_seed_file(services, seed_file)

        spot = services.spots.get_by_name("Blue Lagoon")
        outdoor = services.tags.get_by_name("outdoor")
        food = services.tags.get_by_name("food")

        assert spot.tags == [outdoor.id, food.id]
        assert spot.categories == ["beach", "swimming"]
        assert spot.rating == 4.5

    def test_second_load_skips_everything(self, services, seed_file):
        load_seed_file(services, seed_file)
        summary = load_seed_file(services, seed_file)

        assert summary["keywords"] == {"created": 0, "skipped": 2}
        assert summary["tags"] == {"created": 0, "skipped": 2}
        assert summary["spots"] == {"created": 0, "skipped": 1}

        outdoor = services.tags.get_by_name("outdoor")
        assert len(outdoor.keywords) == 2

    def test_existing_tag_receives_missing_keywords(self, services, tmp_path):
        services.tags.create({"name": "outdoor", "keywords": ["hiking"]})
        path = tmp_path / "seed.yaml"
        path.write_text("tags:\n  - name: Outdoor\n    keywords: [Hiking, Trail]\n")

        summary = load_seed_file(services, path)

        assert summary["tags"] == {"created": 0, "skipped": 1}
        outdoor = services.tags.get_by_name("outdoor")
        assert [k.name for k in services.tags.keywords_of(outdoor.id)] == [
            "hiking",
            "trail",
        ]

    def test_unknown_spot_tag_is_reported(self, services, tmp_path):
        path = tmp_path / "seed.yaml"
        path.write_text("spots:\n  - name: Blue Lagoon\n    tags: [nightlife]\n")

        summary = load_seed_file(services, path)

        assert summary["spots"] == {"created": 0, "skipped": 0}
        assert len(summary["errors"]) == 1
        assert "nightlife" in summary["errors"][0]

    def test_invalid_item_is_reported(self, services, tmp_path):
        path = tmp_path / "seed.yaml"
        path.write_text("plans:\n  - name: Weekend\n    price: lots\n  - name: Day Trip\n")

        summary = load_seed_file(services, path)

        assert summary["plans"] == {"created": 1, "skipped": 0}
        assert summary["errors"][0].startswith("plans: Weekend:")
