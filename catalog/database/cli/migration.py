"""
Migration Commands
-------------------

Schema revisions of the catalog database (Alembic).

Commands:
    - status: Current and head revision, in the selected output format
    - upgrade: Apply migrations up to a revision
    - downgrade: Roll back to a revision (asks for confirmation)

Every command reports the revision before and after, so a run can be
checked from its output alone:

    $ catalogdb migration upgrade
    ⬆️  None -> 3f9c2a7e1b04

    $ catalogdb --format json migration status --check
    {"current_revision": "3f9c2a7e1b04", "head_revision": "3f9c2a7e1b04",
     "status": "up_to_date"}

``status --check`` exits with code 1 while migrations are pending.
"""
from typing import Dict, Optional

import click

from catalog.core.logging_manager import handle_cli_error
from catalog.core.exceptions import DatabaseError
from . import emit, get_db


def _revision(ctx: click.Context) -> Optional[str]:
    history: Dict[str, Optional[str]] = get_db(ctx).get_migration_history()
    if "error" in history:
        raise DatabaseError(f"Cannot read migration status: {history['error']}")
    return history["current_revision"]


@click.group()
@click.pass_context
def migration(ctx: click.Context) -> None:
    """Schema revisions (Alembic)."""
    pass


@migration.command("status")
@click.option("--check", is_flag=True, help="Exit with 1 if migrations are pending")
@click.pass_context
def migration_status(ctx, check):
    """Show the database revision against the newest migration."""
    try:
        history = get_db(ctx).get_migration_history()
    except DatabaseError as e:
        handle_cli_error(ctx, e, "migration_status")
    emit(ctx, history)

    if "error" in history:
        ctx.exit(1)
    if check and history["status"] != "up_to_date":
        ctx.exit(1)


@migration.command("upgrade")
@click.option("--revision", default="head", show_default=True, help="Target revision")
@click.pass_context
def migration_upgrade(ctx, revision):
    """Apply migrations up to REVISION."""
    try:
        db = get_db(ctx)
        before = _revision(ctx)
        db.upgrade_database(revision)
        click.echo(f"⬆️  {before} -> {_revision(ctx)}")

    except DatabaseError as e:
        handle_cli_error(
            ctx, e, "migration_upgrade", additional_context={"revision": revision}
        )


@migration.command("downgrade")
@click.argument("revision")
@click.confirmation_option(
    prompt="⚠️  Downgrading may drop catalog tables and their data. Continue?"
)
@click.pass_context
def migration_downgrade(ctx, revision):
    """Roll the schema back to REVISION ('base' removes every table)."""
    try:
        db = get_db(ctx)
        before = _revision(ctx)
        db.downgrade_database(revision)
        click.echo(f"⬇️  {before} -> {_revision(ctx)}")

    except DatabaseError as e:
        handle_cli_error(
            ctx, e, "migration_downgrade", additional_context={"revision": revision}
        )
