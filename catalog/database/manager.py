#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for the spot catalog.

Provides the CatalogDB class for interacting with the SQLite database.
Handles:
    - Initialization of the database engine and sessionmaker
    - Transactional session scopes with logging
    - Migration management via Alembic
    - Detached keyword cleanup passes (inline or on a worker pool)
    - Catalog statistics

Key Features:
    - Transaction management with automatic rollback
    - One independent transaction per cleanup item
    - Fresh databases are created from the ORM models and stamped at head;
      existing ones are upgraded

Notes
==============
- All datetime fields are UTC-aware
- Store failures are surfaced, never retried
- Cleanup failures are logged and swallowed per item
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

# --- Third party ---
from sqlalchemy import Engine, create_engine, inspect
from sqlalchemy.orm import Session, sessionmaker

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

# --- Local imports ---
from catalog.core.exceptions import DatabaseError
from catalog.core.logging_manager import CatalogLogger, safe_logger
from catalog.core.paths import ALEMBIC_INI
from .decorators import handle_db_errors, log_database_operation
from .models import Base, Keyword, Plan, Spot, Tag
from .relationship_manager import TagKeywordRelations
from .store import EntityStore

CATALOG_MODELS = {
    "keywords": Keyword,
    "tags": Tag,
    "plans": Plan,
    "spots": Spot,
}


class CatalogDB:
    """
    Main database manager for the spot catalog.

    Attributes:
        - db_path (Path): Filesystem path to the SQLite database file.
        - alembic_dir (Path): Filesystem path to the Alembic directory.
        - engine (Engine): SQLAlchemy engine instance.
        - SessionLocal (sessionmaker): SQLAlchemy session factory.
        - cleanup_workers (int): Worker threads for cleanup passes
          (0 runs them inline).

    Usage:
        db = CatalogDB("~/path/to/catalog.db", ALEMBIC_DIR)
        with db.session_scope() as session:
            tags = TagManager(session, db.logger).get_all()
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Union[str, Path],
        alembic_dir: Union[str, Path],
        log_dir: Optional[Union[str, Path]] = None,
        cleanup_workers: int = 0,
    ) -> None:
        """
        Initialize database engine and session factory.

        Args:
            db_path (str | Path): Path to the SQLite file.
            alembic_dir (str | Path): Path to the Alembic directory.
            log_dir (str | Path): Directory for log files (optional)
            cleanup_workers (int): Size of the cleanup worker pool
        """
        self.db_path = Path(db_path).expanduser().resolve()
        self.alembic_dir = Path(alembic_dir).expanduser().resolve()

        # --- Logging ---
        if log_dir:
            self.log_dir = Path(log_dir).expanduser().resolve() / "system"
            self.logger: Optional[CatalogLogger] = CatalogLogger(
                self.log_dir,
                component_name="database",
            )
        else:
            self.logger = None

        # --- Cleanup pool ---
        self.cleanup_workers = max(0, int(cleanup_workers))
        self._executor: Optional[ThreadPoolExecutor] = None
        if self.cleanup_workers:
            self._executor = ThreadPoolExecutor(
                max_workers=self.cleanup_workers,
                thread_name_prefix="catalog-cleanup",
            )

        self._setup_engine()

    def _setup_engine(self) -> None:
        """Initialize database engine and session factory."""
        logger = safe_logger(self.logger)
        try:
            logger.log_operation(
                "database_init_start",
                {
                    "db_path": str(self.db_path),
                    "alembic_dir": str(self.alembic_dir),
                },
            )

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            is_new = not self.db_path.exists()

            self.engine: Engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                pool_pre_ping=True,
                connect_args={"check_same_thread": False},
            )

            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=True,
                expire_on_commit=False,
            )

            self.alembic_cfg: Config = self._setup_alembic()

            if is_new:
                self.initialize_schema()

            logger.log_operation("database_init_complete", {"success": True})

        except Exception as e:
            logger.log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}") from e

    # ---- Session Management ----
    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional scope around operations with logging.

        Usage:
            with db.session_scope() as session:
                keyword = KeywordManager(session, db.logger).find_or_create("hiking")
        """
        logger = safe_logger(self.logger)
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        logger.log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
            logger.log_debug("session_commit", {"session_id": session_id})
        except Exception as e:
            session.rollback()
            logger.log_error(
                e, {"operation": "session_rollback", "session_id": session_id}
            )
            raise
        finally:
            session.close()
            logger.log_debug("session_close", {"session_id": session_id})

    def get_session(self) -> Session:
        """Create and return a new SQLAlchemy session."""
        return self.SessionLocal()

    # ---- Alembic setup ----
    def _setup_alembic(self) -> Config:
        """Setup Alembic configuration."""
        try:
            safe_logger(self.logger).log_debug("Setting up Alembic configuration...")

            alembic_cfg = Config(str(ALEMBIC_INI)) if ALEMBIC_INI.exists() else Config()
            alembic_cfg.set_main_option("script_location", str(self.alembic_dir))
            alembic_cfg.set_main_option("sqlalchemy.url", f"sqlite:///{self.db_path}")
            alembic_cfg.set_main_option(
                "file_template",
                "%%(year)d%%(month).2d%%(day).2d_%%(hour).2d%%(minute).2d_%%(slug)s",
            )
            return alembic_cfg
        except Exception as e:
            safe_logger(self.logger).log_error(e, {"operation": "setup_alembic"})
            raise DatabaseError(f"Alembic configuration failed: {e}") from e

    @handle_db_errors
    @log_database_operation("initialize_schema")
    def initialize_schema(self) -> None:
        """
        Initialize database - create tables if needed and run migrations.

        Actions:
            If the database has no tables,
                creates all tables from the ORM models
                stamps the Alembic revision to head
            Otherwise,
                runs pending migrations to update schema
        """
        try:
            with self.engine.connect() as conn:
                table_names = inspect(conn).get_table_names()

            if not table_names:
                Base.metadata.create_all(bind=self.engine)
                command.stamp(self.alembic_cfg, "head")
                safe_logger(self.logger).log_operation(
                    "fresh_database_created",
                    {"tables_created": len(Base.metadata.tables)},
                )
            else:
                self.upgrade_database()
                safe_logger(self.logger).log_operation(
                    "existing_database_migrated",
                    {"table_count": len(table_names)},
                )
        except DatabaseError:
            raise
        except Exception as e:
            raise DatabaseError(f"Could not initialize database: {e}") from e

    @handle_db_errors
    @log_database_operation("reset_database")
    def reset_database(self) -> None:
        """Drop every catalog table and the Alembic version table, then re-create."""
        Base.metadata.drop_all(bind=self.engine)
        with self.engine.begin() as conn:
            conn.exec_driver_sql("DROP TABLE IF EXISTS alembic_version")
        self.initialize_schema()

    @handle_db_errors
    @log_database_operation("upgrade_database")
    def upgrade_database(self, revision: str = "head") -> None:
        """
        Upgrade the database schema to the specified Alembic revision.

        Args:
            revision (str, optional): Target revision. Defaults to 'head'.
        """
        try:
            command.upgrade(self.alembic_cfg, revision)
        except Exception as e:
            raise DatabaseError(f"Database upgrade failed: {e}") from e

    @handle_db_errors
    @log_database_operation("downgrade_database")
    def downgrade_database(self, revision: str) -> None:
        """
        Downgrade the database schema to a specified Alembic revision.

        Args:
            revision (str): The target revision to downgrade to.
        """
        try:
            command.downgrade(self.alembic_cfg, revision)
        except Exception as e:
            raise DatabaseError(f"Database downgrade to {revision} failed: {e}") from e

    def get_migration_history(self) -> Dict[str, Optional[str]]:
        """
        Compare the database revision with the newest migration script.

        Returns:
            Dictionary with keys:
                - 'current_revision' (str | None): Revision stamped in the database
                - 'head_revision' (str | None): Newest revision in ``alembic_dir``
                - 'status' (str): 'up_to_date' or 'needs_migration'
                - 'error' (str, optional): Present if an exception occurred
        """
        try:
            head_rev = ScriptDirectory.from_config(self.alembic_cfg).get_current_head()
            with self.engine.connect() as conn:
                current_rev = MigrationContext.configure(conn).get_current_revision()

            up_to_date = current_rev is not None and current_rev == head_rev
            return {
                "current_revision": current_rev,
                "head_revision": head_rev,
                "status": "up_to_date" if up_to_date else "needs_migration",
            }
        except Exception as e:
            safe_logger(self.logger).log_error(e, {"operation": "get_migration_history"})
            return {"error": str(e)}

    # ---- Keyword cleanup ----
    def _prune_one(self, tag_id: str, keyword_id: str) -> int:
        """Run one cleanup item in its own transaction; failures are logged."""
        try:
            with self.session_scope() as session:
                relations = TagKeywordRelations(session, self.logger)
                return relations.prune_dangling(tag_id, [keyword_id])
        except Exception as e:
            safe_logger(self.logger).log_error(
                e,
                {
                    "operation": "keyword_cleanup",
                    "tag_id": tag_id,
                    "keyword_id": keyword_id,
                },
            )
            return 0

    def schedule_keyword_cleanup(
        self, tag_id: str, keyword_ids: Iterable[str]
    ) -> List[Future]:
        """
        Prune dangling keyword ids from a tag, one transaction per id.

        Runs inline when no cleanup workers are configured; otherwise each
        id is submitted to the pool and the futures are returned without
        waiting on them.

        Args:
            tag_id: Tag whose keyword list is checked
            keyword_ids: Ids to check

        Returns:
            Submitted futures (empty when run inline)
        """
        ids = list(dict.fromkeys(keyword_ids))
        safe_logger(self.logger).log_debug(
            "keyword_cleanup_scheduled",
            {"tag_id": tag_id, "count": len(ids), "inline": self._executor is None},
        )

        if self._executor is None:
            pruned = sum(self._prune_one(tag_id, keyword_id) for keyword_id in ids)
            safe_logger(self.logger).log_summary(
                "keyword_cleanup",
                {"tag_id": tag_id, "checked": len(ids), "pruned": pruned},
            )
            return []

        return [
            self._executor.submit(self._prune_one, tag_id, keyword_id)
            for keyword_id in ids
        ]

    # ---- Statistics ----
    @handle_db_errors
    def get_stats(self) -> Dict[str, Dict[str, int]]:
        """Live and soft-deleted record counts per entity type."""
        stats: Dict[str, Dict[str, int]] = {}
        with self.session_scope() as session:
            for label, model in CATALOG_MODELS.items():
                store: EntityStore[Any] = EntityStore(session, model, self.logger)
                total = store.count(include_deleted=True)
                live = store.count()
                stats[label] = {"live": live, "deleted": total - live}
        return stats

    # ---- Shutdown ----
    def close(self) -> None:
        """Wait for pending cleanup, dispose of the engine and close logs."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self.engine.dispose()
        if self.logger:
            self.logger.close()

    # ----- Context Manager Support -----
    def __enter__(self) -> "CatalogDB":
        """Support for context manager usage."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Cleanup on context manager exit."""
        del exc_type, exc_val, exc_tb
        self.close()
