"""
Setup & Initialization Commands
--------------------------------

Database initialization commands.

Commands:
    - init: Create the schema (or migrate an existing database)
    - reset: Drop and re-create every table (dangerous!)
"""
import click

from catalog.core.logging_manager import handle_cli_error
from catalog.core.exceptions import DatabaseError
from . import get_db


@click.command()
@click.pass_context
def init(ctx):
    """Initialize the catalog database."""
    try:
        click.echo("🚀 Initializing catalog database...")
        db = get_db(ctx)
        click.echo("🗄️  Initializing database schema...")
        db.initialize_schema()
        status = db.get_migration_history()
        click.echo(f"✅ Database ready at revision {status.get('current_revision')}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "init")


@click.command()
@click.confirmation_option(prompt="⚠️  This will DELETE all catalog data! Are you sure?")
@click.pass_context
def reset(ctx):
    """Reset database (DANGEROUS - deletes all data!)."""
    try:
        click.echo("🗑️  Resetting database...")
        db = get_db(ctx)
        db.reset_database()
        click.echo("✅ Database reset complete!")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "reset")
