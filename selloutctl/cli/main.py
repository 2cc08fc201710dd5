"""Main CLI entry point for selloutctl."""

from __future__ import annotations

import click

from selloutctl import __version__

# Import command groups
from selloutctl.cli.config_cmd import config
from selloutctl.cli.upload import estimate, incidents, upload
from selloutctl.cli.ventas import ventas

# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="selloutctl")
def cli() -> None:
    """selloutctl - Bulk sellout spreadsheet uploads.

    Upload sales/stock workbooks to the sellout backend, follow the
    processing countdown, and review the incidents it reports.

    Get started:

      selloutctl config init          # Create config file

      selloutctl estimate FILE.xlsx   # Expected duration

      selloutctl upload FILE.xlsx     # Upload and process

    Use --help on any command for more information.
    """
    pass


# =============================================================================
# Register Commands
# =============================================================================

cli.add_command(config)
cli.add_command(upload)
cli.add_command(incidents)
cli.add_command(estimate)
cli.add_command(ventas)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
