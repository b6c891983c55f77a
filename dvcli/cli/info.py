"""Instance information commands for dvcli."""

from __future__ import annotations

import click

from dvcli.cli.common import Context, emit, global_options, handle_errors
from dvcli.services.info import InfoService


@click.group()
def info() -> None:
    """Query instance information."""
    pass


@info.command("version")
@global_options
@handle_errors
def info_version(ctx: Context) -> None:
    """Show the software version of the Dataverse instance.

    Example:
        dvcli info version
        dvcli info version -o table
    """
    result = InfoService(ctx.get_client()).get_version(timeout=ctx.timeout)
    emit(ctx, result, id_field="version")
