"""
conftest.py
-----------
Shared pytest fixtures for catalog tests.

Provides fixtures for:
- File-backed CatalogDB instances (schema created and stamped)
- In-memory SQLite sessions for store-level tests
- Entity managers and the tag-keyword relation manager
- Public services
"""
import pytest
from pathlib import Path
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from catalog.core.logging_manager import CatalogLogger
from catalog.core.paths import ALEMBIC_DIR


# ----- Path Fixtures -----

@pytest.fixture
def test_data_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def seed_file(test_data_dir):
    """Sample YAML seed file."""
    return test_data_dir / "seed.yaml"


@pytest.fixture
def test_db_path(tmp_path):
    """Create temporary test database path."""
    return tmp_path / "test.db"


@pytest.fixture
def test_alembic_dir():
    """Path to the package's Alembic directory."""
    return ALEMBIC_DIR


@pytest.fixture
def mock_logger():
    """Mock logger instance."""
    return MagicMock(spec=CatalogLogger)


# ----- Test Database Fixtures -----

@pytest.fixture
def test_db(test_db_path, test_alembic_dir):
    """
    Create test database instance with schema.

    Returns a CatalogDB whose schema was created from the models and
    stamped at the latest migration. Cleanup runs inline.
    """
    from catalog.database.manager import CatalogDB

    db = CatalogDB(db_path=test_db_path, alembic_dir=test_alembic_dir)

    yield db

    db.close()


@pytest.fixture
def db_session(test_db):
    """
    Create a database session for tests.

    Provides a session with automatic rollback after test.
    """
    with test_db.session_scope() as session:
        yield session
        session.rollback()


@pytest.fixture
def memory_session():
    """Session on a throwaway in-memory SQLite database."""
    from catalog.database.models import Base

    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, expire_on_commit=False)
    session = Session()

    yield session

    session.close()
    engine.dispose()


# ----- Manager Fixtures -----

@pytest.fixture
def keyword_manager(db_session):
    """Create KeywordManager instance for testing."""
    from catalog.database.managers.keyword_manager import KeywordManager
    return KeywordManager(db_session)


@pytest.fixture
def tag_manager(db_session):
    """Create TagManager instance for testing."""
    from catalog.database.managers.tag_manager import TagManager
    return TagManager(db_session)


@pytest.fixture
def plan_manager(db_session):
    """Create PlanManager instance for testing."""
    from catalog.database.managers.plan_manager import PlanManager
    return PlanManager(db_session)


@pytest.fixture
def spot_manager(db_session):
    """Create SpotManager instance for testing."""
    from catalog.database.managers.spot_manager import SpotManager
    return SpotManager(db_session)


@pytest.fixture
def relations(db_session):
    """Create TagKeywordRelations instance for testing."""
    from catalog.database.relationship_manager import TagKeywordRelations
    return TagKeywordRelations(db_session)


@pytest.fixture
def services(test_db):
    """Public services over the test database."""
    from catalog.database.services import CatalogServices
    return CatalogServices(test_db)
