"""Dataset commands for dvcli."""

from __future__ import annotations

import click

from dvcli.cli.common import (
    Context,
    confirm_destructive,
    emit,
    global_options,
    handle_errors,
    load_body,
)
from dvcli.models.dataset import (
    Dataset,
    DatasetCreateBody,
    DatasetVersion,
    EditMetadataBody,
    VersionKind,
)
from dvcli.services.datasets import DatasetService

BODY_FILE = click.Path(exists=True, dir_okay=False)


@click.group()
def dataset() -> None:
    """Manage datasets.

    DATASET arguments accept a numeric id or a persistent id
    such as doi:10.5072/FK2/ABC123.
    """
    pass


@dataset.command("get")
@click.argument("target")
@global_options
@handle_errors
def dataset_get(ctx: Context, target: str) -> None:
    """Show a dataset and its latest version.

    Example:
        dvcli dataset get 42
        dvcli dataset get doi:10.5072/FK2/ABC123
    """
    result = DatasetService(ctx.get_client()).get(target, timeout=ctx.timeout)
    emit(ctx, result, columns=Dataset.table_columns())


@dataset.command("create")
@click.option("--collection", "-c", required=True, help="Alias or id of the owning collection")
@click.option("--body", "body_file", type=BODY_FILE, required=True, help="JSON/YAML dataset body")
@global_options
@handle_errors
def dataset_create(ctx: Context, collection: str, body_file: str) -> None:
    """Create a draft dataset.

    Example:
        dvcli dataset create --collection root --body dataset.json
    """
    body = load_body(DatasetCreateBody, body_file)
    result = DatasetService(ctx.get_client()).create(collection, body, timeout=ctx.timeout)
    emit(ctx, result, columns=["id", "persistentId"], id_field="persistentId")


@dataset.command("edit")
@click.argument("target")
@click.option("--body", "body_file", type=BODY_FILE, required=True, help="JSON/YAML field list")
@click.option("--replace", is_flag=True, help="Replace existing values instead of adding")
@global_options
@handle_errors
def dataset_edit(ctx: Context, target: str, body_file: str, replace: bool) -> None:
    """Edit the metadata of a dataset's draft version.

    Example:
        dvcli dataset edit doi:10.5072/FK2/ABC123 --body fields.yaml --replace
    """
    body = load_body(EditMetadataBody, body_file)
    result = DatasetService(ctx.get_client()).edit(
        target, body, replace=replace, timeout=ctx.timeout
    )
    emit(ctx, result, columns=DatasetVersion.table_columns())


@dataset.command("delete")
@click.argument("target")
@confirm_destructive("Delete this dataset?")
@global_options
@handle_errors
def dataset_delete(ctx: Context, target: str) -> None:
    """Delete an unpublished dataset.

    Example:
        dvcli dataset delete 42 --yes
    """
    result = DatasetService(ctx.get_client()).delete(target, timeout=ctx.timeout)
    emit(ctx, result, id_field="message")


@dataset.command("publish")
@click.argument("target")
@click.option(
    "--version",
    "version_kind",
    type=click.Choice([kind.value for kind in VersionKind]),
    default=VersionKind.MAJOR.value,
    show_default=True,
    help="Version bump to apply",
)
@global_options
@handle_errors
def dataset_publish(ctx: Context, target: str, version_kind: str) -> None:
    """Publish the draft version of a dataset.

    Example:
        dvcli dataset publish 42 --version minor
    """
    result = DatasetService(ctx.get_client()).publish(
        target, VersionKind(version_kind), timeout=ctx.timeout
    )
    emit(ctx, result, columns=Dataset.table_columns())


@dataset.command("link")
@click.argument("target")
@click.option("--collection", "-c", required=True, help="Alias or id of the collection to link into")
@global_options
@handle_errors
def dataset_link(ctx: Context, target: str, collection: str) -> None:
    """Link a dataset into another collection.

    Example:
        dvcli dataset link 42 --collection otherlab
    """
    result = DatasetService(ctx.get_client()).link(target, collection, timeout=ctx.timeout)
    emit(ctx, result, id_field="message")
