"""CLI commands for schema introspection: categories, columns, datatypes, datatype, category-create."""

from __future__ import annotations

import json as json_mod

import click

from attimo.cli_common import fail, get_db
from attimo.datatypes import CategoryTemplate


@click.command("categories")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_categories(as_json: bool) -> None:
    """List categories."""
    with get_db() as db:
        names = db.list_categories()
    if as_json:
        click.echo(json_mod.dumps(names))
        return
    if not names:
        click.echo("No categories.")
    for name in names:
        click.echo(name)


@click.command("columns")
@click.argument("category")
@click.option("--include", multiple=True, help="Only these columns (repeatable)")
@click.option("--exclude", multiple=True, help="Drop these columns (repeatable)")
@click.option("--fill", "fill_behavior", type=click.Choice(["open", "close"]), default=None, help="Filter by fill behavior")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_columns(
    category: str,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    fill_behavior: str | None,
    as_json: bool,
) -> None:
    """List the datatype columns of CATEGORY."""
    with get_db() as db:
        try:
            columns = db.list_category_columns(
                category,
                include=list(include) if include else None,
                exclude=list(exclude) if exclude else None,
                fill_behavior=fill_behavior,  # type: ignore[arg-type]
            )
        except ValueError as e:
            fail(str(e), as_json=as_json)
    if as_json:
        click.echo(json_mod.dumps(columns))
        return
    for column in columns:
        click.echo(column)


@click.command("datatypes")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_datatypes(as_json: bool) -> None:
    """List datatype definitions."""
    with get_db() as db:
        datatypes = db.list_datatypes()
    if as_json:
        click.echo(json_mod.dumps([dt.to_dict() for dt in datatypes], indent=2))
        return
    for dt in datatypes:
        click.echo(f"{dt.id:>3}  {dt.name:<16} {dt.variable_type:<7} {dt.fill_behavior:<6} {dt.value_check}")


@click.command("datatype")
@click.argument("category")
@click.argument("column")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show_datatype(category: str, column: str, as_json: bool) -> None:
    """Show the datatype behind COLUMN of CATEGORY."""
    with get_db() as db:
        try:
            dt = db.get_column_datatype(category, column)
        except ValueError as e:
            fail(str(e), as_json=as_json)
    if as_json:
        click.echo(json_mod.dumps(dt.to_dict(), indent=2))
        return
    click.echo(f"Name:       {dt.name}")
    click.echo(f"Type:       {dt.variable_type} ({dt.storage_type})")
    click.echo(f"Check:      {dt.value_check}")
    click.echo(f"Fill:       {dt.fill_behavior}")
    click.echo(f"Completion: {dt.completion_value} (sort: {dt.completion_sort})")


@click.command("category-create")
@click.argument("name")
@click.argument("columns", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def category_create(name: str, columns: tuple[str, ...], as_json: bool) -> None:
    """Create category NAME from datatype ids or names (in column order)."""
    refs: list[int | str] = [int(c) if c.isdigit() else c for c in columns]
    with get_db() as db:
        try:
            db.create_category(CategoryTemplate(name=name, columns=tuple(refs)))
            created = db.list_category_columns(name)
        except ValueError as e:
            fail(str(e), as_json=as_json)
    if as_json:
        click.echo(json_mod.dumps({"category": name, "columns": created}))
    else:
        click.echo(f"Created category {name}: {', '.join(created)}")


def register(cli: click.Group) -> None:
    """Register schema commands with the CLI group."""
    cli.add_command(list_categories)
    cli.add_command(list_columns)
    cli.add_command(list_datatypes)
    cli.add_command(show_datatype)
    cli.add_command(category_create)
