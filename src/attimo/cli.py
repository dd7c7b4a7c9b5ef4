"""CLI for attimo.

Convention-based: discovers .attimo/ by walking up from cwd.

Usage:
    attimo init                                   # Initialize .attimo/ in cwd
    attimo categories                             # List categories
    attimo columns General --fill open            # List a category's columns
    attimo datatypes                              # List datatype definitions
    attimo add General -f Note=Call               # Open an item (Opened defaults to today)
    attimo list General --page 2                  # Page through live rows
    attimo show General 3                         # Show one row
    attimo update General 3 -f Note=Done          # Edit open-time columns
    attimo close General:3                        # Close an item (date defaults to today)
    attimo delete General 3                       # Soft-delete a row
    attimo pending                                # Items still open
    attimo dashboard                              # Local JSON API
"""

from __future__ import annotations

import click

from attimo import __version__
from attimo.cli_commands import admin, categories, pending, rows


@click.group()
@click.version_option(version=__version__, prog_name="attimo")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Attimo -- user-defined record categories with open/close tracking."""
    ctx.ensure_object(dict)


admin.register(cli)
categories.register(cli)
rows.register(cli)
pending.register(cli)


if __name__ == "__main__":
    cli()
