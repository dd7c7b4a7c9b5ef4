"""CLI commands for category rows: add, list, show, update, delete, close."""

from __future__ import annotations

import json as json_mod
from typing import Any

import click

from attimo.cli_common import fail, get_db, parse_fields, parse_value
from attimo.dates import parse_time_input
from attimo.db_base import AUDIT_COLUMNS
from attimo.db_pending import format_pointer, parse_pointer


def _echo_row(row: dict[str, Any]) -> None:
    width = max(len(k) for k in row)
    for key, value in row.items():
        click.echo(f"{key + ':':<{width + 1}} {'' if value is None else value}")


@click.command("add")
@click.argument("category")
@click.option("--field", "-f", multiple=True, help="Column value as key=value (repeatable)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def add(category: str, field: tuple[str, ...], as_json: bool) -> None:
    """Open a new item in CATEGORY.

    Open-time date columns that are not given default to today.
    """
    with get_db() as db:
        try:
            name = db.resolve_category(category)
            data = parse_fields(db, name, field)
            for column in db.list_category_columns(name, fill_behavior="open"):
                if column not in data and db.get_column_datatype(name, column).variable_type == "time":
                    data[column] = parse_time_input("")
            item_id = db.create_row(name, data)
            row = db.read_row(name, item_id)
        except ValueError as e:
            fail(str(e), as_json=as_json)
    if as_json:
        click.echo(json_mod.dumps(row, indent=2, default=str))
    else:
        click.echo(f"Created {format_pointer(name, item_id)}")


@click.command("list")
@click.argument("category")
@click.option("--field", "-f", multiple=True, help="Equality filter as key=value (repeatable)")
@click.option("--page", default=1, type=int, help="Page number (default 1)")
@click.option("--page-size", default=None, type=int, help="Rows per page (default from config)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_rows(category: str, field: tuple[str, ...], page: int, page_size: int | None, as_json: bool) -> None:
    """List live rows of CATEGORY, newest first."""
    with get_db() as db:
        try:
            filters = parse_fields(db, category, field)
            result = db.list_rows_paginated(category, filters, page, page_size or db.page_size)
        except ValueError as e:
            fail(str(e), as_json=as_json)
    if as_json:
        click.echo(json_mod.dumps(result, indent=2, default=str))
        return
    if not result["rows"]:
        click.echo("No rows.")
        return
    for row in result["rows"]:
        rest = ", ".join(f"{k}={v}" for k, v in row.items() if k not in AUDIT_COLUMNS and v is not None)
        click.echo(f"{row['id']:>5}  {rest}")
    click.echo(f"Page {result['current_page']}/{result['total_pages']} ({result['total_rows']} rows)")


@click.command("show")
@click.argument("category")
@click.argument("item_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show(category: str, item_id: int, as_json: bool) -> None:
    """Show one row."""
    with get_db() as db:
        try:
            row = db.read_row(category, item_id)
        except LookupError:
            fail(f"Not found: {category}:{item_id}", as_json=as_json)
        except ValueError as e:
            fail(str(e), as_json=as_json)
    if as_json:
        click.echo(json_mod.dumps(row, indent=2, default=str))
    else:
        _echo_row(row)


@click.command("update")
@click.argument("category")
@click.argument("item_id", type=int)
@click.option("--field", "-f", multiple=True, required=True, help="Column value as key=value (repeatable)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def update(category: str, item_id: int, field: tuple[str, ...], as_json: bool) -> None:
    """Update open-time columns of a row."""
    with get_db() as db:
        try:
            db.update_row(category, item_id, parse_fields(db, category, field))
            row = db.read_row(category, item_id)
        except (LookupError, ValueError) as e:
            fail(str(e), as_json=as_json)
    if as_json:
        click.echo(json_mod.dumps(row, indent=2, default=str))
    else:
        click.echo(f"Updated {category}:{item_id}")


@click.command("delete")
@click.argument("category")
@click.argument("item_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def delete(category: str, item_id: int, as_json: bool) -> None:
    """Soft-delete a row (it also leaves the pending list)."""
    with get_db() as db:
        try:
            db.delete_row(category, item_id)
        except (LookupError, ValueError) as e:
            fail(str(e), as_json=as_json)
    if as_json:
        click.echo(json_mod.dumps({"deleted": f"{category}:{item_id}"}))
    else:
        click.echo(f"Deleted {category}:{item_id}")


@click.command("close")
@click.argument("pointer")
@click.argument("value", default="")
@click.option("--column", default=None, help="Close column, when the category has several")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def close(pointer: str, value: str, column: str | None, as_json: bool) -> None:
    """Close the item POINTER (category:id).

    VALUE fills the close column; for date columns it defaults to today and
    accepts +N/-N minutes from now.
    """
    with get_db() as db:
        try:
            category, item_id = parse_pointer(pointer)
            close_columns = db.list_category_columns(category, fill_behavior="close")
            target = column or (close_columns[0] if len(close_columns) == 1 else None)
            close_value: Any = value
            if target is not None:
                close_value = parse_value(db.get_column_datatype(category, target), value)
            db.close_item(category, item_id, close_value, column=column)
        except (LookupError, ValueError) as e:
            fail(str(e), as_json=as_json)
    if as_json:
        click.echo(json_mod.dumps({"closed": pointer, "value": close_value}))
    else:
        click.echo(f"Closed {pointer}")


def register(cli: click.Group) -> None:
    """Register row commands with the CLI group."""
    cli.add_command(add)
    cli.add_command(list_rows)
    cli.add_command(show)
    cli.add_command(update)
    cli.add_command(delete)
    cli.add_command(close)
