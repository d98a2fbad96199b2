#!/usr/bin/env python3
"""
Catalog Database Management CLI
-----------------------------------

Modular command-line interface for the spot catalog.

This module provides the main CLI group and shared context setup
for all catalog commands.

Command Structure:
    - Setup & Initialization (init, reset)
    - Migration Management (migration)
    - Entities (keywords, tags, plans, spots)
    - Maintenance (maintenance prune-keywords, maintenance stats)
    - Seed Import (load)

Usage:
    # Get general help
    catalogdb --help

    # Create a tag and attach keywords
    catalogdb tags create outdoor
    catalogdb tags add-keywords outdoor Hiking hiking Camping --by-name

    # JSON instead of YAML output
    catalogdb --format json tags list
"""
import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
import yaml

from catalog.core.paths import ALEMBIC_DIR, DB_PATH, LOG_DIR
from catalog.database import CatalogDB, CatalogServices, Message
from catalog.database.models import Base


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    help="Path to database file",
)
@click.option(
    "--alembic-dir",
    type=click.Path(),
    default=str(ALEMBIC_DIR),
    help="Path to Alembic directory",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Path to log directory",
)
@click.option(
    "--cleanup-workers",
    type=int,
    default=0,
    show_default=True,
    help="Worker threads for keyword cleanup (0 runs it inline)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    show_default=True,
    help="Output format for records",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, alembic_dir, log_dir, cleanup_workers, output_format, verbose):
    """Spot Catalog Database Management CLI"""

    # Suppress Alembic INFO logging by default
    logging.getLogger("alembic").setLevel(logging.WARNING)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["alembic_dir"] = Path(alembic_dir)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["cleanup_workers"] = cleanup_workers
    ctx.obj["format"] = output_format
    ctx.obj["verbose"] = verbose
    ctx.call_on_close(lambda: _close_db(ctx))


def _close_db(ctx: click.Context) -> None:
    db = ctx.obj.pop("db", None)
    if db is not None:
        db.close()


def get_db(ctx) -> CatalogDB:
    """Get or create database instance from context."""
    if "db" not in ctx.obj:
        ctx.obj["db"] = CatalogDB(
            db_path=ctx.obj["db_path"],
            alembic_dir=ctx.obj["alembic_dir"],
            log_dir=ctx.obj["log_dir"],
            cleanup_workers=ctx.obj["cleanup_workers"],
        )
        ctx.obj["logger"] = ctx.obj["db"].logger
    return ctx.obj["db"]


def get_services(ctx) -> CatalogServices:
    """Get or create the public services bound to the context database."""
    if "services" not in ctx.obj:
        ctx.obj["services"] = CatalogServices(get_db(ctx))
    return ctx.obj["services"]


def _plain(data: Any) -> Any:
    if isinstance(data, Base):
        return data.to_dict()
    if isinstance(data, Message):
        return data.to_dict()
    if isinstance(data, (list, tuple)):
        return [_plain(item) for item in data]
    if isinstance(data, dict):
        return {key: _plain(value) for key, value in data.items()}
    return data


def emit(ctx: click.Context, data: Any) -> None:
    """Print records in the format selected on the command line."""
    plain = _plain(data)
    if ctx.obj.get("format") == "json":
        click.echo(json.dumps(plain, indent=2, ensure_ascii=False))
    else:
        click.echo(
            yaml.safe_dump(plain, sort_keys=False, allow_unicode=True).rstrip()
        )


def unwrap(ctx: click.Context, result: Any) -> Any:
    """
    Return a service result, or report a Message and exit.

    Exit codes: 1 for storage errors, 2 for not found, 3 for conflicts.
    """
    if not isinstance(result, Message):
        return result

    exit_codes = {"not_found": 2, "conflict": 3}
    click.echo(f"❌ {result.message}", err=True)
    if result.error and ctx.obj.get("verbose"):
        click.echo(f"   {result.error}", err=True)
    sys.exit(exit_codes.get(result.kind, 1))


# Import and register command modules
# These imports must come after CLI group definition
from .setup import init, reset  # noqa: E402
from .migration import migration  # noqa: E402
from .entities import keywords, tags, plans, spots  # noqa: E402
from .maintenance import maintenance  # noqa: E402
from .load import load  # noqa: E402

# Register top-level commands
cli.add_command(init)
cli.add_command(reset)
cli.add_command(load)

# Register command groups
cli.add_command(migration)
cli.add_command(keywords)
cli.add_command(tags)
cli.add_command(plans)
cli.add_command(spots)
cli.add_command(maintenance)


def main() -> None:
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
