"""
Spot Catalog Package
====================

Catalog of spots (places) tagged with reusable tags and keywords and
organized by plans, with a soft-delete consistency layer over SQLite.

Main Components:
    - core: Logging, validation, paths, exceptions
    - database: SQLAlchemy models, entity store, managers, services, CLI
    - migrations: Alembic schema history

Primary Interfaces:
    - catalog.database.CatalogDB: Engine, sessions, managers
    - catalog.database.services.CatalogServices: Message-returning operations
    - catalog.database.cli: ``catalogdb`` command-line interface

Example Usage:
    >>> from catalog.database import CatalogDB
    >>> from catalog.database.services import CatalogServices
    >>> from catalog.core.paths import DB_PATH, ALEMBIC_DIR
    >>> services = CatalogServices(CatalogDB(db_path=DB_PATH, alembic_dir=ALEMBIC_DIR))
    >>> services.tags.create({"name": "Outdoor"})
"""

__version__ = "1.0.0"
