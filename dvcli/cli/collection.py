"""Collection commands for dvcli."""

from __future__ import annotations

from typing import Optional

import click

from dvcli.cli.common import (
    Context,
    confirm_destructive,
    emit,
    global_options,
    handle_errors,
    load_body,
)
from dvcli.models.collection import Collection, CollectionCreateBody, CollectionItem, CollectionType
from dvcli.services.collections import CollectionService

COLLECTION_TYPES = [t.value for t in CollectionType]


@click.group()
def collection() -> None:
    """Manage collections (dataverses)."""
    pass


@collection.command("create")
@click.option("--parent", required=True, help="Alias or id of the parent collection (e.g. root)")
@click.option(
    "--body",
    "body_file",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON/YAML file with the collection body",
)
@click.option("--name", help="Collection name")
@click.option("--alias", help="Collection alias (letters, digits, '-' and '_')")
@click.option("--type", "dataverse_type", type=click.Choice(COLLECTION_TYPES), help="Category")
@click.option("--contact", "contacts", multiple=True, help="Contact e-mail (repeatable)")
@click.option("--affiliation", help="Affiliation")
@click.option("--description", help="Description")
@global_options
@handle_errors
def collection_create(
    ctx: Context,
    parent: str,
    body_file: Optional[str],
    name: Optional[str],
    alias: Optional[str],
    dataverse_type: Optional[str],
    contacts: tuple[str, ...],
    affiliation: Optional[str],
    description: Optional[str],
) -> None:
    """Create a collection from a body file or inline flags.

    Example:
        dvcli collection create --parent root --body collection.yaml
        dvcli collection create --parent root --name "My Lab" --alias mylab \\
            --type LABORATORY --contact lab@example.org
    """
    inline = [name, alias, dataverse_type, affiliation, description]
    if body_file:
        if any(value is not None for value in inline) or contacts:
            raise click.UsageError("Use either --body or inline flags, not both")
        body = load_body(CollectionCreateBody, body_file)
    else:
        missing = [
            flag
            for flag, value in (("--name", name), ("--alias", alias), ("--type", dataverse_type))
            if not value
        ]
        if missing:
            raise click.UsageError(f"Missing {', '.join(missing)} (or pass --body)")
        body = CollectionCreateBody.new(
            name,
            alias,
            dataverse_type,
            affiliation=affiliation,
            description=description,
            contacts=contacts,
        )

    result = CollectionService(ctx.get_client()).create(parent, body, timeout=ctx.timeout)
    emit(ctx, result, columns=Collection.table_columns(), id_field="alias")


@collection.command("delete")
@click.argument("alias")
@confirm_destructive("Delete this collection?")
@global_options
@handle_errors
def collection_delete(ctx: Context, alias: str) -> None:
    """Delete an unpublished, empty collection.

    Example:
        dvcli collection delete mylab --yes
    """
    result = CollectionService(ctx.get_client()).delete(alias, timeout=ctx.timeout)
    emit(ctx, result, id_field="message")


@collection.command("publish")
@click.argument("alias")
@global_options
@handle_errors
def collection_publish(ctx: Context, alias: str) -> None:
    """Publish a collection.

    Example:
        dvcli collection publish mylab
    """
    result = CollectionService(ctx.get_client()).publish(alias, timeout=ctx.timeout)
    emit(ctx, result, columns=Collection.table_columns(), id_field="alias")


@collection.command("contents")
@click.argument("alias")
@global_options
@handle_errors
def collection_contents(ctx: Context, alias: str) -> None:
    """List datasets and sub-collections of a collection.

    Example:
        dvcli collection contents root -o table
        dvcli collection contents root -q  # ids only
    """
    result = CollectionService(ctx.get_client()).get_contents(alias, timeout=ctx.timeout)
    emit(ctx, result, columns=CollectionItem.table_columns(), title=f"Contents of {alias}")
