"""
test_manager.py
---------------
Tests for CatalogDB: session scopes, schema setup, migrations and the
detached keyword cleanup pass.
"""
import pytest
from concurrent.futures import wait
from unittest.mock import MagicMock, patch

from sqlalchemy import inspect

from catalog.core.exceptions import DatabaseError
from catalog.core.logging_manager import CatalogLogger
from catalog.database.manager import CatalogDB
from catalog.database.managers import KeywordManager, TagManager
from catalog.database.models import Tag
from catalog.database.relationship_manager import TagKeywordRelations


class TestSessionScope:
    """Tests for transaction management in CatalogDB."""

    @pytest.fixture
    def db_instance(self, tmp_path):
        """CatalogDB instance with mocked schema setup."""
        with patch.object(CatalogDB, "initialize_schema", autospec=True):
            db = CatalogDB(db_path=tmp_path / "test.db", alembic_dir=tmp_path / "alembic")
        db.logger = MagicMock(spec=CatalogLogger)
        yield db
        db.engine.dispose()

    def test_session_scope_commit_on_success(self, db_instance):
        """Session commits on successful execution within session_scope."""
        mock_session = MagicMock()
        db_instance.SessionLocal = MagicMock(return_value=mock_session)

        with db_instance.session_scope():
            pass

        mock_session.commit.assert_called_once()
        mock_session.rollback.assert_not_called()
        mock_session.close.assert_called_once()

    def test_session_scope_rollback_on_error(self, db_instance):
        """Session rolls back, logs and re-raises when the block fails."""
        mock_session = MagicMock()
        db_instance.SessionLocal = MagicMock(return_value=mock_session)

        with pytest.raises(ValueError):
            with db_instance.session_scope():
                raise ValueError("boom")

        mock_session.commit.assert_not_called()
        mock_session.rollback.assert_called_once()
        mock_session.close.assert_called_once()
        context = db_instance.logger.log_error.call_args[0][1]
        assert context["operation"] == "session_rollback"


class TestSchema:
    """Schema initialization and migrations."""

    def test_fresh_database_is_created_and_stamped(self, test_db):
        """A new database gets every table and the head revision."""
        tables = set(inspect(test_db.engine).get_table_names())
        assert {"keywords", "tags", "plans", "spots", "alembic_version"} <= tables

        status = test_db.get_migration_history()
        assert status["status"] == "up_to_date"
        assert status["current_revision"] == "3f9c2a7e1b04"
        assert status["head_revision"] == "3f9c2a7e1b04"

    def test_reopening_existing_database(self, test_db, test_db_path, test_alembic_dir):
        """Opening an existing file keeps its data."""
        with test_db.session_scope() as session:
            KeywordManager(session).find_or_create("hiking")
        test_db.close()

        with CatalogDB(test_db_path, test_alembic_dir) as reopened:
            with reopened.session_scope() as session:
                assert KeywordManager(session).exists("Hiking")

    def test_downgrade_and_upgrade(self, test_db):
        """Migrations can be rolled back to base and re-applied."""
        test_db.downgrade_database("base")
        assert "keywords" not in inspect(test_db.engine).get_table_names()
        assert test_db.get_migration_history()["status"] == "needs_migration"

        test_db.upgrade_database()
        assert "keywords" in inspect(test_db.engine).get_table_names()
        assert test_db.get_migration_history()["status"] == "up_to_date"

    def test_reset_database_drops_data(self, test_db):
        with test_db.session_scope() as session:
            KeywordManager(session).find_or_create("hiking")

        test_db.reset_database()

        assert test_db.get_stats()["keywords"] == {"live": 0, "deleted": 0}
        assert test_db.get_migration_history()["status"] == "up_to_date"

    def test_bad_revision_raises(self, test_db):
        with pytest.raises(DatabaseError, match="upgrade failed"):
            test_db.upgrade_database("nonexistent")


class TestKeywordCleanup:
    """Detached per-id cleanup passes."""

    @staticmethod
    def _tag_with_dangling(db):
        """Tag holding one live and one soft-deleted keyword id."""
        with db.session_scope() as session:
            keywords = KeywordManager(session)
            live = keywords.find_or_create("hiking")
            gone = keywords.find_or_create("camping")
            keywords.soft_delete(gone.id)
            tag = TagManager(session).create({"name": "outdoor"})
            tag.keywords = [live.id, gone.id, "missing-id"]
            session.flush()
            return tag.id, live.id, gone.id

    @staticmethod
    def _keywords(db, tag_id):
        with db.session_scope() as session:
            return list(session.get(Tag, tag_id).keywords)

    def test_inline_cleanup(self, test_db):
        """Without workers, cleanup runs before the call returns."""
        tag_id, live_id, gone_id = self._tag_with_dangling(test_db)

        futures = test_db.schedule_keyword_cleanup(
            tag_id, [live_id, gone_id, "missing-id"]
        )

        assert futures == []
        assert self._keywords(test_db, tag_id) == [live_id]

    def test_worker_cleanup(self, test_db_path, test_alembic_dir):
        """With workers, cleanup is submitted to the pool."""
        with CatalogDB(test_db_path, test_alembic_dir, cleanup_workers=1) as db:
            tag_id, live_id, gone_id = self._tag_with_dangling(db)

            futures = db.schedule_keyword_cleanup(tag_id, [live_id, gone_id, "missing-id"])
            wait(futures)

            assert len(futures) == 3
            assert self._keywords(db, tag_id) == [live_id]

    def test_failure_is_swallowed_per_item(self, test_db):
        """One failing item is logged and does not stop the others."""
        tag_id, live_id, gone_id = self._tag_with_dangling(test_db)
        test_db.logger = MagicMock(spec=CatalogLogger)
        real_prune = TagKeywordRelations.prune_dangling

        def flaky(self, tag, keyword_ids):
            if gone_id in keyword_ids:
                raise RuntimeError("store down")
            return real_prune(self, tag, keyword_ids)

        with patch.object(TagKeywordRelations, "prune_dangling", flaky):
            test_db.schedule_keyword_cleanup(tag_id, [live_id, gone_id, "missing-id"])

        assert self._keywords(test_db, tag_id) == [live_id, gone_id]
        context = test_db.logger.log_error.call_args[0][1]
        assert context["operation"] == "keyword_cleanup"
        assert context["keyword_id"] == gone_id
        test_db.logger.log_summary.assert_called_once_with(
            "keyword_cleanup", {"tag_id": tag_id, "checked": 3, "pruned": 1}
        )


class TestStats:
    def test_counts_live_and_deleted(self, test_db):
        with test_db.session_scope() as session:
            keywords = KeywordManager(session)
            keywords.find_or_create("hiking")
            keywords.soft_delete(keywords.find_or_create("camping").id)

        stats = test_db.get_stats()
        assert stats["keywords"] == {"live": 1, "deleted": 1}
        assert stats["tags"] == {"live": 0, "deleted": 0}
