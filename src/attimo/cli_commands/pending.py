"""CLI commands for the pending index."""

from __future__ import annotations

import json as json_mod

import click

from attimo.cli_common import get_db


@click.command("pending")
@click.option("--pointers", is_flag=True, help="Print bare category:id pointers only")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def pending(pointers: bool, as_json: bool) -> None:
    """List items that are still open, most recent first."""
    with get_db() as db:
        if pointers:
            found = db.list_pending_pointers()
            if as_json:
                click.echo(json_mod.dumps(found))
            else:
                for p in found:
                    click.echo(p)
            return
        items = db.get_pending_items()
    if as_json:
        click.echo(json_mod.dumps(items, indent=2, default=str))
        return
    if not items:
        click.echo("Nothing pending.")
        return
    for item in items:
        row = item["row"]
        summary = next((str(v) for k, v in row.items() if k.lower() == "note" and v), "")
        click.echo(f"{item['pointer']:<20} since {item['pending_since'][:10]}  {summary}")


def register(cli: click.Group) -> None:
    """Register pending commands with the CLI group."""
    cli.add_command(pending)
