"""Shared CLI helpers.

Provides ``get_db()`` and the ``key=value`` field parser so that ``cli.py``
and the ``cli_commands/*.py`` modules can use them without circular imports.
"""

from __future__ import annotations

import json as json_mod
import sys
from typing import Any, NoReturn

import click

from attimo.core import ATTIMO_DIR_NAME, AttimoDB, find_attimo_root
from attimo.datatypes import Datatype, coerce_value
from attimo.dates import parse_time_input
from attimo.logging import setup_logging


def get_db() -> AttimoDB:
    """Discover .attimo/ and return an initialized AttimoDB."""
    try:
        attimo_dir = find_attimo_root()
    except FileNotFoundError:
        click.echo(f"No {ATTIMO_DIR_NAME}/ found. Run 'attimo init' first.", err=True)
        sys.exit(1)
    setup_logging(attimo_dir)
    return AttimoDB.from_project(attimo_dir.parent)


def fail(message: str, *, as_json: bool = False) -> NoReturn:
    """Report an error the way every command does and exit 1."""
    if as_json:
        click.echo(json_mod.dumps({"error": message}))
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def parse_fields(db: AttimoDB, category: str, field: tuple[str, ...]) -> dict[str, Any]:
    """Turn repeated ``-f key=value`` options into typed row data.

    Each value is coerced to its column's logical type via ``parse_value``.
    Raises ValueError (incl. attimo's ValidationError) on a malformed pair
    or value.
    """
    data: dict[str, Any] = {}
    for f in field:
        if "=" not in f:
            msg = f"Invalid field format: {f} (expected key=value)"
            raise ValueError(msg)
        key, raw = f.split("=", 1)
        datatype = db.get_column_datatype(category, key.strip())
        data[datatype.name] = parse_value(datatype, raw)
    return data


def parse_value(datatype: Datatype, raw: str) -> Any:
    """Coerce one textual value; ``time`` columns accept "", "+N" and "-N" (minutes from now)."""
    if datatype.variable_type == "time":
        return parse_time_input(raw)
    return coerce_value(datatype, raw)
