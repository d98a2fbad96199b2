"""
Seed Import Command
--------------------

Commands:
    - load: Import keywords, tags, plans and spots from a YAML file
"""
import click

from catalog.core.logging_manager import handle_cli_error
from catalog.core.exceptions import DatabaseError, ValidationError
from catalog.database.loader import load_seed_file
from . import emit, get_services


@click.command()
@click.argument("seed_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def load(ctx, seed_file):
    """Import seed data from SEED_FILE (YAML)."""
    try:
        click.echo(f"📥 Loading {seed_file}...")
        summary = load_seed_file(get_services(ctx), seed_file)
        emit(ctx, summary)

        if summary["errors"]:
            click.echo(f"⚠️  {len(summary['errors'])} item(s) rejected", err=True)
            ctx.exit(1)

    except (DatabaseError, ValidationError, OSError) as e:
        handle_cli_error(ctx, e, "load", additional_context={"file": seed_file})
