#!/usr/bin/env python3
"""
logging_manager.py
--------------------
Logging for the catalog database and its command line.

Each ``CatalogLogger`` owns two stdlib loggers for one component:

    <log_dir>/<component>.log   everything from DEBUG up
    <log_dir>/errors.log        errors with context and traceback

Records carry a kind prefix and a JSON payload so they can be grepped:

    OPERATION - add_keywords_completed: {"duration_seconds": 0.01, ...}
    SUMMARY - sweep_keywords: references_pruned=1 tags_changed=1 tags_scanned=3
    ERROR - DatabaseError: disk I/O error | {"operation": "tags.get_all"}

Code that may run without a configured logger goes through
``safe_logger(logger)``, which falls back to a no-op ``NullLogger``.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

# --- Third party imports ---
import click

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _render(kind: str, message: str, details: Optional[Mapping[str, Any]] = None) -> str:
    """Format one record as ``KIND - message[: {json}]``."""
    if not details:
        return f"{kind} - {message}"
    return f"{kind} - {message}: {json.dumps(dict(details), default=str, sort_keys=True)}"


def _render_counts(counts: Mapping[str, Any]) -> str:
    return " ".join(f"{key}={counts[key]}" for key in sorted(counts))


def _format_cli_error(error: Exception, show_traceback: bool = False) -> str:
    message = f"❌ {type(error).__name__}: {error}"
    if show_traceback:
        message += f"\n\n{traceback.format_exc()}"
    return message


class CatalogLogger:
    """
    File-backed logger for one catalog component.

    Attributes:
        log_dir: Directory for log files
        component_name: Component label (``database``, ``cli``)
        main_logger: Receives every record of the component
        error_logger: Receives errors only
    """

    def __init__(
        self,
        log_dir: Path,
        component_name: str = "catalog",
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.max_bytes = max_bytes
        self.backup_count = backup_count

        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.main_logger = self._build_logger(
            "operations", f"{component_name}.log", logging.DEBUG, console=True
        )
        self.error_logger = self._build_logger("errors", "errors.log", logging.ERROR)

    def _build_logger(
        self, channel: str, filename: str, level: int, console: bool = False
    ) -> logging.Logger:
        """
        Configure ``<component>.<channel>`` with a rotating file handler.

        Handlers left by an earlier instance of the same component are
        replaced, so reopening a database does not duplicate records.
        """
        logger = logging.getLogger(f"{self.component_name}.{channel}")
        logger.setLevel(level)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

        file_handler = RotatingFileHandler(
            self.log_dir / filename,
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(file_handler)

        if console:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.WARNING)
            console_handler.setFormatter(
                logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S")
            )
            logger.addHandler(console_handler)
        return logger

    def close(self) -> None:
        """Close and detach every handler owned by this logger."""
        for logger in (self.main_logger, self.error_logger):
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    # ---- Records ----
    def log_operation(
        self, operation: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record a completed (or started) database operation."""
        self.main_logger.info(_render("OPERATION", operation, details))

    def log_summary(self, operation: str, counts: Mapping[str, Any]) -> None:
        """
        Record the counters of a batch operation on one line.

        Used for keyword cleanup passes, sweeps and seed imports, e.g.
        ``SUMMARY - keyword_cleanup: checked=3 pruned=1 tag_id=...``.
        """
        self.main_logger.info(f"SUMMARY - {operation}: {_render_counts(counts)}")

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.main_logger.debug(_render("DEBUG", message, details))

    def log_warning(
        self, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.main_logger.warning(_render("WARNING", message, details))

    def log_error(
        self, error: Exception, context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Record an error and its context in errors.log.

        The traceback is appended when called while handling the exception.
        """
        line = f"ERROR - {type(error).__name__}: {error}"
        if context:
            line += f" | {json.dumps(context, default=str, sort_keys=True)}"
        self.error_logger.error(line)
        if sys.exc_info()[0] is not None:
            self.error_logger.error(f"Traceback:\n{traceback.format_exc()}")

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """
        Log the full error and return the one-line message for the terminal.

        Examples:
            >>> logger.log_cli_error(DatabaseError("database is locked"))
            '❌ DatabaseError: database is locked'
        """
        self.log_error(error, context or {"source": "cli"})
        return _format_cli_error(error, show_traceback)


class NullLogger:
    """No-op stand-in with the ``CatalogLogger`` recording interface."""

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_summary(self, operation: str, counts: Mapping[str, Any]) -> None:
        pass

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_warning(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        return _format_cli_error(error, show_traceback)


_null_logger = NullLogger()


def safe_logger(logger: Optional[CatalogLogger]) -> CatalogLogger:
    """Return ``logger``, or the shared NullLogger when it is None."""
    return logger if logger is not None else _null_logger  # type: ignore[return-value]


def handle_cli_error(
    ctx: "click.Context",
    error: Exception,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Log a failed CLI command, print its message to stderr and exit.

    Args:
        ctx: Click context holding ``logger`` and ``verbose``
        error: Exception that stopped the command
        operation: Command label (e.g. 'migration_upgrade')
        additional_context: Extra context such as ids or file names
        exit_code: Process exit code

    Note:
        Never returns.
    """
    context: Dict[str, Any] = {"operation": operation}
    if additional_context:
        context.update(additional_context)

    message = safe_logger(ctx.obj.get("logger")).log_cli_error(
        error, context, show_traceback=ctx.obj.get("verbose", False)
    )
    click.echo(message, err=True)
    sys.exit(exit_code)
