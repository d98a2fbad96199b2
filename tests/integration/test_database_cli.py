"""
test_database_cli.py
--------------------
End-to-end tests for the catalogdb command line.

Each invocation opens its own CatalogDB on a temporary database, the way
separate shell commands would.
"""
import json

import pytest
from click.testing import CliRunner

from catalog.database.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, tmp_path, test_alembic_dir):
    """Run the CLI against a database under tmp_path."""
    base_args = [
        "--db-path",
        str(tmp_path / "catalog.db"),
        "--alembic-dir",
        str(test_alembic_dir),
        "--log-dir",
        str(tmp_path / "logs"),
    ]

    def _invoke(*args, output_json=False, input=None):
        fmt = ["--format", "json"] if output_json else []
        return runner.invoke(cli, base_args + fmt + list(args), obj={}, input=input)

    return _invoke


def _json(result):
    return json.loads(result.stdout)


class TestSetupCommands:
    def test_init(self, invoke):
        result = invoke("init")
        assert result.exit_code == 0, result.output
        assert "Database ready at revision 3f9c2a7e1b04" in result.output

    def test_migration_status(self, invoke):
        invoke("init")
        result = invoke("migration", "status", "--check", output_json=True)
        assert result.exit_code == 0
        assert _json(result) == {
            "current_revision": "3f9c2a7e1b04",
            "head_revision": "3f9c2a7e1b04",
            "status": "up_to_date",
        }

    def test_downgrade_then_upgrade(self, invoke):
        invoke("init")

        down = invoke("migration", "downgrade", "base", "--yes")
        assert down.exit_code == 0, down.output
        assert "3f9c2a7e1b04 -> None" in down.output
        assert invoke("migration", "status", "--check").exit_code == 1

        up = invoke("migration", "upgrade")
        assert up.exit_code == 0, up.output
        assert "None -> 3f9c2a7e1b04" in up.output
        assert invoke("migration", "status", "--check").exit_code == 0

    def test_downgrade_needs_confirmation(self, invoke):
        invoke("init")
        result = invoke("migration", "downgrade", "base", input="n\n")
        assert result.exit_code == 1
        assert invoke("migration", "status", "--check").exit_code == 0

    def test_reset(self, invoke):
        invoke("tags", "create", "outdoor")
        result = invoke("reset", "--yes")
        assert result.exit_code == 0
        assert invoke("tags", "list").exit_code == 2


class TestEntityCommands:
    def test_create_and_show(self, invoke):
        created = invoke("tags", "create", "Outdoor", output_json=True)
        assert created.exit_code == 0, created.output
        tag = _json(created)
        assert tag["name"] == "outdoor"

        shown = invoke("tags", "show", tag["id"], output_json=True)
        assert _json(shown)["id"] == tag["id"]

        by_name = invoke("tags", "show", "OUTDOOR", "--by-name", output_json=True)
        assert _json(by_name)["id"] == tag["id"]

    def test_create_with_fields(self, invoke):
        result = invoke(
            "spots",
            "create",
            "Blue Lagoon",
            "--field",
            "rating=4.5",
            "--field",
            "categories=[Beach, beach]",
            "--field",
            "contact_info={phone: '+34 600 000 000'}",
            output_json=True,
        )
        assert result.exit_code == 0, result.output
        spot = _json(result)
        assert spot["rating"] == 4.5
        assert spot["categories"] == ["beach"]
        assert spot["contact_info"] == {"phone": "+34 600 000 000"}

    def test_bad_field(self, invoke):
        result = invoke("plans", "create", "Day Trip", "--field", "price")
        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output

    def test_update_and_delete(self, invoke):
        plan = _json(invoke("plans", "create", "Day Trip", output_json=True))

        updated = invoke(
            "plans", "update", plan["id"], "--field", "price=35", output_json=True
        )
        assert _json(updated)["price"] == 35.0

        deleted = invoke(
            "plans", "delete", plan["id"], "--reason", "retired", output_json=True
        )
        assert _json(deleted)["deletion_reason"] == "retired"

        assert invoke("plans", "show", plan["id"]).exit_code == 2

    def test_list_empty_is_not_found(self, invoke):
        result = invoke("keywords", "list")
        assert result.exit_code == 2
        assert "There are no keywords available" in result.output

    def test_conflict_exit_code(self, invoke):
        invoke("keywords", "create", "sunset")
        result = invoke("keywords", "create", "Sunset")
        assert result.exit_code == 3
        assert "under id" in result.output

    def test_validation_exit_code(self, invoke):
        result = invoke("spots", "create", "Blue Lagoon", "--field", "rating=9")
        assert result.exit_code == 1

    def test_find_or_create(self, invoke):
        first = _json(invoke("keywords", "find-or-create", "Sunset", output_json=True))
        second = _json(invoke("keywords", "find-or-create", "sunset", output_json=True))
        assert first["id"] == second["id"]


class TestTagKeywordCommands:
    def test_add_keywords_and_cleanup(self, invoke):
        invoke("tags", "create", "outdoor")

        added = invoke(
            "tags", "add-keywords", "outdoor", "Hiking", "hiking", "Camping",
            "--by-name", output_json=True,
        )
        assert added.exit_code == 0, added.output
        assert len(_json(added)["keywords"]) == 2

        camping = _json(invoke("keywords", "show", "camping", "--by-name", output_json=True))
        invoke("keywords", "delete", camping["id"])

        listed = invoke("tags", "keywords", "outdoor", "--by-name", output_json=True)
        assert [k["name"] for k in _json(listed)] == ["hiking"]

        swept = invoke("maintenance", "prune-keywords", "--dry-run")
        assert "References would be pruned: 1" in swept.output

        swept = invoke("maintenance", "prune-keywords")
        assert "References pruned: 1" in swept.output

        tag = _json(invoke("tags", "show", "outdoor", "--by-name", output_json=True))
        assert len(tag["keywords"]) == 1

    def test_remove_keyword(self, invoke):
        invoke("tags", "create", "outdoor")
        invoke("tags", "add-keywords", "outdoor", "hiking", "--by-name")

        result = invoke(
            "tags", "remove-keyword", "outdoor", "Hiking", "--by-name", output_json=True
        )
        assert _json(result)["keywords"] == []

        missing = invoke("tags", "remove-keyword", "outdoor", "ghost", "--by-name")
        assert missing.exit_code == 2

    def test_spot_search(self, invoke):
        outdoor = _json(invoke("tags", "create", "outdoor", output_json=True))
        invoke("tags", "add-keywords", outdoor["id"], "Sunset")
        invoke("spots", "create", "Red Ridge", "--field", f"tags=['{outdoor['id']}']")

        found = invoke("spots", "search", "SUNSET", output_json=True)
        assert found.exit_code == 0, found.output
        assert [s["name"] for s in _json(found)] == ["Red Ridge"]

        assert invoke("spots", "search", "ghost").exit_code == 2

    def test_add_keywords_unknown_tag(self, invoke):
        result = invoke("tags", "add-keywords", "nope", "hiking")
        assert result.exit_code == 2


class TestMaintenanceCommands:
    def test_load_and_stats(self, invoke, seed_file):
        loaded = invoke("load", str(seed_file), output_json=True)
        assert loaded.exit_code == 0, loaded.output

        stats = invoke("maintenance", "stats", output_json=True)
        assert _json(stats) == {
            "keywords": {"live": 5, "deleted": 0},
            "tags": {"live": 2, "deleted": 0},
            "plans": {"live": 2, "deleted": 0},
            "spots": {"live": 1, "deleted": 0},
        }

    def test_load_reports_rejections(self, invoke, tmp_path):
        seed = tmp_path / "bad.yaml"
        seed.write_text("plans:\n  - name: Weekend\n    price: lots\n")

        result = invoke("load", str(seed))
        assert result.exit_code == 1
        assert "1 item(s) rejected" in result.output

    def test_prune_unknown_tag(self, invoke):
        result = invoke("maintenance", "prune-keywords", "--tag", "nope")
        assert result.exit_code == 2
