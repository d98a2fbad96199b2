"""
Maintenance & Monitoring Commands
----------------------------------

Catalog maintenance and statistics.

Commands:
    - prune-keywords: Remove references to soft-deleted or missing keywords
    - stats: Display live and deleted record counts
"""
import click

from catalog.core.logging_manager import handle_cli_error
from catalog.core.exceptions import DatabaseError
from . import emit, get_db, get_services, unwrap


@click.group()
@click.pass_context
def maintenance(ctx: click.Context) -> None:
    """Catalog maintenance and statistics."""
    pass


@maintenance.command("prune-keywords")
@click.option("--tag", "tag_id", default=None, help="Only sweep this tag id")
@click.option("--dry-run", is_flag=True, help="Report without changing anything")
@click.pass_context
def prune_keywords(ctx, tag_id, dry_run):
    """Prune dangling keyword references from live tags."""
    summary = unwrap(ctx, get_services(ctx).tags.sweep(tag_id=tag_id, dry_run=dry_run))

    verb = "would be pruned" if dry_run else "pruned"
    click.echo("🧹 Keyword reference sweep")
    click.echo(f"  • Tags scanned: {summary['tags_scanned']}")
    click.echo(f"  • Tags with dangling keywords: {summary['tags_changed']}")
    click.echo(f"  • References {verb}: {summary['references_pruned']}")


@maintenance.command("stats")
@click.pass_context
def stats(ctx):
    """Display record counts per entity type."""
    try:
        db = get_db(ctx)
        emit(ctx, db.get_stats())

    except DatabaseError as e:
        handle_cli_error(ctx, e, "stats")
