"""Tests for database decorators and context managers."""
import pytest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from catalog.core.exceptions import DatabaseError, ValidationError
from catalog.core.logging_manager import CatalogLogger
from catalog.database.decorators import (
    DatabaseOperation,
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)


class TestDatabaseOperation:
    """Tests for DatabaseOperation context manager."""

    def test_successful_operation(self):
        """DatabaseOperation should log completion on success."""
        mock_logger = MagicMock(spec=CatalogLogger)

        with DatabaseOperation(mock_logger, "prune_dangling", {"tag_id": "t1"}):
            result = 1 + 1

        assert result == 2
        mock_logger.log_operation.assert_called_once()
        name, details = mock_logger.log_operation.call_args[0]
        assert name == "prune_dangling_completed"
        assert details["success"] is True
        assert details["tag_id"] == "t1"
        assert isinstance(details["duration_seconds"], float)

    def test_successful_operation_with_none_logger(self):
        """DatabaseOperation should work with None logger (uses NullLogger)."""
        with DatabaseOperation(None, "test_operation"):
            pass

    def test_integrity_error_raises_database_error(self):
        """DatabaseOperation should convert IntegrityError to DatabaseError."""
        mock_logger = MagicMock(spec=CatalogLogger)

        with pytest.raises(DatabaseError) as exc_info:
            with DatabaseOperation(mock_logger, "test_operation"):
                raise IntegrityError("statement", {}, Exception("duplicate"))

        assert "Data integrity violation" in str(exc_info.value)
        mock_logger.log_error.assert_called_once()

    def test_sqlalchemy_error_raises_database_error(self):
        """DatabaseOperation should convert SQLAlchemyError to DatabaseError."""
        mock_logger = MagicMock(spec=CatalogLogger)

        with pytest.raises(DatabaseError) as exc_info:
            with DatabaseOperation(mock_logger, "test_operation"):
                raise SQLAlchemyError("connection failed")

        assert "Database operation failed" in str(exc_info.value)

    def test_other_exceptions_propagate(self):
        """DatabaseOperation should propagate non-SQLAlchemy exceptions."""
        mock_logger = MagicMock(spec=CatalogLogger)

        with pytest.raises(ValueError):
            with DatabaseOperation(mock_logger, "test_operation"):
                raise ValueError("invalid value")

        mock_logger.log_error.assert_called_once()
        mock_logger.log_operation.assert_not_called()

    def test_log_start_option(self):
        """DatabaseOperation should log start when log_start=True."""
        mock_logger = MagicMock(spec=CatalogLogger)

        with DatabaseOperation(mock_logger, "test_operation", log_start=True):
            pass

        mock_logger.log_debug.assert_called_once()
        assert "Starting test_operation" in mock_logger.log_debug.call_args[0][0]


class _Worker:
    """Minimal object carrying a logger, as managers do."""

    def __init__(self, logger=None):
        self.logger = logger

    @handle_db_errors
    def fail_integrity(self):
        raise IntegrityError("stmt", {}, Exception("UNIQUE constraint failed"))

    @handle_db_errors
    def fail_sqlalchemy(self):
        raise SQLAlchemyError("disk I/O error")

    @log_database_operation("compute")
    def compute(self, value):
        return value * 2

    @log_database_operation("explode")
    def explode(self):
        raise ValueError("bad")

    @validate_metadata(["name"])
    def create(self, metadata):
        return metadata["name"]


class TestHandleDbErrors:
    """Tests for handle_db_errors decorator."""

    def test_integrity_error_converted(self):
        with pytest.raises(DatabaseError, match="Data integrity violation"):
            _Worker().fail_integrity()

    def test_sqlalchemy_error_converted(self):
        with pytest.raises(DatabaseError, match="Database operation failed"):
            _Worker().fail_sqlalchemy()


class TestLogDatabaseOperation:
    """Tests for log_database_operation decorator."""

    def test_logs_completion(self):
        mock_logger = MagicMock(spec=CatalogLogger)
        assert _Worker(mock_logger).compute(21) == 42

        name, details = mock_logger.log_operation.call_args[0]
        assert name == "compute_completed"
        assert details["success"] is True
        assert details["operation_id"].startswith("compute_")

    def test_logs_and_reraises_errors(self):
        mock_logger = MagicMock(spec=CatalogLogger)
        with pytest.raises(ValueError):
            _Worker(mock_logger).explode()

        mock_logger.log_error.assert_called_once()
        assert mock_logger.log_error.call_args[0][1]["operation"] == "explode"

    def test_without_logger(self):
        assert _Worker().compute(1) == 2


class TestValidateMetadata:
    """Tests for validate_metadata decorator."""

    def test_positional_metadata(self):
        assert _Worker().create({"name": "x"}) == "x"

    def test_keyword_metadata(self):
        assert _Worker().create(metadata={"name": "x"}) == "x"

    def test_missing_field(self):
        with pytest.raises(ValidationError):
            _Worker().create({"price": 3})
