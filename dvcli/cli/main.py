"""Main CLI entry point for dvcli."""

from __future__ import annotations

import click

from dvcli import __version__
from dvcli.cli.collection import collection
from dvcli.cli.config_cmd import config
from dvcli.cli.dataset import dataset
from dvcli.cli.file import file
from dvcli.cli.info import info

# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="dvcli")
def cli() -> None:
    """dvcli - A client for the Dataverse native API.

    Create, publish and link collections and datasets, and upload,
    replace and download data files.

    Get started:

      export DVCLI_URL=https://demo.dataverse.org

      export DVCLI_TOKEN=<api token>

      dvcli info version

    Use --help on any command for more information.
    """
    pass


# =============================================================================
# Register Command Groups
# =============================================================================

cli.add_command(config)
cli.add_command(info)
cli.add_command(collection)
cli.add_command(dataset)
cli.add_command(file)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
