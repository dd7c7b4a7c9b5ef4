"""CLI commands for admin: init, dashboard."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from attimo.core import (
    ATTIMO_DIR_NAME,
    CONFIG_FILENAME,
    DB_FILENAME,
    AttimoDB,
    read_config,
    write_config,
)
from attimo.errors import ConfigurationError
from attimo.logging import setup_logging


@click.command()
@click.option("--no-defaults", is_flag=True, help="Skip the built-in datatypes and categories")
def init(no_defaults: bool) -> None:
    """Initialize .attimo/ in the current directory."""
    cwd = Path.cwd()
    attimo_dir = cwd / ATTIMO_DIR_NAME

    if attimo_dir.exists():
        click.echo(f"{ATTIMO_DIR_NAME}/ already exists in {cwd}")
    else:
        attimo_dir.mkdir()
    if not (attimo_dir / CONFIG_FILENAME).exists():
        config = read_config(attimo_dir)
        config["seed_defaults"] = not no_defaults
        write_config(attimo_dir, config)

    setup_logging(attimo_dir)
    config = read_config(attimo_dir)
    try:
        with AttimoDB(
            attimo_dir / DB_FILENAME,
            seed_defaults=config.get("seed_defaults", True),
            datatypes=config.get("datatypes"),
            categories=config.get("categories"),
        ) as db:
            db.initialize()
            names = db.list_categories()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Initialized {ATTIMO_DIR_NAME}/ in {cwd}")
    click.echo(f"  Categories: {', '.join(names) if names else '(none)'}")
    click.echo("Next: attimo add <category> -f <column>=<value>")


@click.command()
@click.option("--port", default=8378, type=int, help="Server port (default 8378)")
def dashboard(port: int) -> None:
    """Serve the local JSON API (requires attimo[dashboard])."""
    try:
        from attimo.dashboard import main as dashboard_main
    except ImportError:
        click.echo('Dashboard requires extra dependencies. Install with: pip install "attimo[dashboard]"', err=True)
        sys.exit(1)
    dashboard_main(port=port)


def register(cli: click.Group) -> None:
    """Register admin commands with the CLI group."""
    cli.add_command(init)
    cli.add_command(dashboard)
