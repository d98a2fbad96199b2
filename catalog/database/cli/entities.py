"""
Entity Commands
----------------

Lifecycle commands for keywords, tags, plans and spots, plus the
tag-keyword relation.

Commands (per entity group):
    - list: All live records
    - show: One live record by id (or by name with --by-name)
    - create: Create a record from a name and KEY=VALUE fields
    - update: Replace the given fields on a live record
    - delete: Soft delete a record

Extra commands:
    - keywords find-or-create: Return or create the live keyword
    - tags add-keywords: Append keywords by name
    - tags remove-keyword: Remove one keyword by name
    - tags keywords: List the live keywords of a tag
    - spots search: Spots reachable through a keyword of their tags

Field values are parsed as YAML, so lists and mappings can be given inline:
    catalogdb spots create "Blue Lagoon" \\
        --field rating=4.5 \\
        --field "categories=[Beach, Swimming]" \\
        --field "contact_info={phone: '+34 600 000 000'}"
"""
from typing import Any, Dict, Iterable

import click
import yaml

from . import emit, get_services, unwrap


def parse_fields(pairs: Iterable[str]) -> Dict[str, Any]:
    """
    Turn ``KEY=VALUE`` pairs into a payload.

    Raises:
        click.BadParameter: If a pair has no ``=`` or an unparsable value
    """
    payload: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise click.BadParameter(f"Expected KEY=VALUE, got '{pair}'")
        try:
            payload[key] = yaml.safe_load(raw) if raw.strip() else None
        except yaml.YAMLError as e:
            raise click.BadParameter(f"Cannot parse value for '{key}': {e}") from e
    return payload


def _entity_group(entity: str, help_text: str) -> click.Group:
    """Build the list/show/create/update/delete group for one entity type."""

    @click.group(name=entity, help=help_text)
    @click.pass_context
    def group(ctx: click.Context) -> None:
        pass

    @group.command("list")
    @click.pass_context
    def list_cmd(ctx):
        """List all live records."""
        service = get_services(ctx).for_entity(entity)
        emit(ctx, unwrap(ctx, service.get_all()))

    @group.command("show")
    @click.argument("ident")
    @click.option("--by-name", is_flag=True, help="Look up by name instead of id")
    @click.pass_context
    def show_cmd(ctx, ident, by_name):
        """Show one live record."""
        service = get_services(ctx).for_entity(entity)
        result = service.get_by_name(ident) if by_name else service.get_by_id(ident)
        emit(ctx, unwrap(ctx, result))

    @group.command("create")
    @click.argument("name")
    @click.option("--field", "fields", multiple=True, help="KEY=VALUE (repeatable)")
    @click.pass_context
    def create_cmd(ctx, name, fields):
        """Create a record."""
        payload = parse_fields(fields)
        payload["name"] = name
        service = get_services(ctx).for_entity(entity)
        emit(ctx, unwrap(ctx, service.create(payload)))

    @group.command("update")
    @click.argument("entity_id")
    @click.option("--name", default=None, help="New name")
    @click.option("--field", "fields", multiple=True, help="KEY=VALUE (repeatable)")
    @click.pass_context
    def update_cmd(ctx, entity_id, name, fields):
        """Replace the given fields on a live record."""
        payload = parse_fields(fields)
        if name is not None:
            payload["name"] = name
        if not payload:
            raise click.UsageError("Nothing to update: pass --name or --field")
        service = get_services(ctx).for_entity(entity)
        emit(ctx, unwrap(ctx, service.update(entity_id, payload)))

    @group.command("delete")
    @click.argument("entity_id")
    @click.option("--reason", default=None, help="Reason for deletion")
    @click.option("--deleted-by", default=None, help="Who deletes the record")
    @click.pass_context
    def delete_cmd(ctx, entity_id, reason, deleted_by):
        """Soft delete a record."""
        service = get_services(ctx).for_entity(entity)
        result = service.soft_delete(entity_id, deleted_by=deleted_by, reason=reason)
        emit(ctx, unwrap(ctx, result))

    return group


keywords = _entity_group("keywords", "Manage keywords.")
tags = _entity_group("tags", "Manage tags and their keywords.")
plans = _entity_group("plans", "Manage plans.")
spots = _entity_group("spots", "Manage spots.")


@keywords.command("find-or-create")
@click.argument("name")
@click.pass_context
def keywords_find_or_create(ctx, name):
    """Return the live keyword with NAME, creating it if needed."""
    emit(ctx, unwrap(ctx, get_services(ctx).keywords.find_or_create(name)))


@spots.command("search")
@click.argument("keyword")
@click.pass_context
def spots_search(ctx, keyword):
    """List live spots whose tags hold KEYWORD."""
    emit(ctx, unwrap(ctx, get_services(ctx).spots.find_by_keyword(keyword)))


def _resolve_tag_id(ctx: click.Context, ident: str, by_name: bool) -> str:
    if not by_name:
        return ident
    tag = unwrap(ctx, get_services(ctx).tags.get_by_name(ident))
    return tag.id


@tags.command("add-keywords")
@click.argument("tag")
@click.argument("names", nargs=-1)
@click.option("--by-name", is_flag=True, help="TAG is a tag name instead of an id")
@click.pass_context
def tags_add_keywords(ctx, tag, names, by_name):
    """Append keywords (by name) to TAG."""
    tag_id = _resolve_tag_id(ctx, tag, by_name)
    emit(ctx, unwrap(ctx, get_services(ctx).tags.add_keywords(tag_id, list(names))))


@tags.command("remove-keyword")
@click.argument("tag")
@click.argument("name")
@click.option("--by-name", is_flag=True, help="TAG is a tag name instead of an id")
@click.pass_context
def tags_remove_keyword(ctx, tag, name, by_name):
    """Remove keyword NAME from TAG only."""
    tag_id = _resolve_tag_id(ctx, tag, by_name)
    emit(ctx, unwrap(ctx, get_services(ctx).tags.remove_keyword(tag_id, name)))


@tags.command("keywords")
@click.argument("tag")
@click.option("--by-name", is_flag=True, help="TAG is a tag name instead of an id")
@click.pass_context
def tags_keywords(ctx, tag, by_name):
    """List the live keywords referenced by TAG."""
    tag_id = _resolve_tag_id(ctx, tag, by_name)
    emit(ctx, unwrap(ctx, get_services(ctx).tags.keywords_of(tag_id)))


__all__ = ["keywords", "tags", "plans", "spots", "parse_fields"]
