#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants and configuration for the catalog project.

The project structure:
    ROOT/
    ├── catalog/       # Package code (core, database, migrations)
    ├── data/          # SQLite database and seed files
    └── logs/          # Application logs

Every constant can be overridden through the ``CATALOG_HOME`` environment
variable, which replaces ROOT for data and logs.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path


def _get_project_root() -> Path:
    """
    Determine project root directory.

    Assumes this file is at ROOT/catalog/core/paths.py.

    Returns:
        Path object for project root
    """
    return Path(__file__).resolve().parent.parent.parent


# ----- Project directory -----
ROOT: Path = _get_project_root()
PACKAGE_DIR = ROOT / "catalog"
HOME_DIR = Path(os.environ.get("CATALOG_HOME", str(ROOT))).expanduser()

# --- Database ---
ALEMBIC_INI = ROOT / "alembic.ini"
ALEMBIC_DIR = PACKAGE_DIR / "migrations"
DATA_DIR = HOME_DIR / "data"
DB_PATH = DATA_DIR / "catalog.db"

# ---- Logs ----
LOG_DIR = HOME_DIR / "logs"
