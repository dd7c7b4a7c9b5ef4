"""Shared utilities, types, and Protocol for DB mixins."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import AbstractContextManager
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Literal, Protocol

if TYPE_CHECKING:
    from attimo.checks import CheckEngine
    from attimo.datatypes import Datatype

# Type aliases shared by the mixins and datatypes.py
FillBehavior = Literal["open", "close"]
VariableType = Literal["string", "int", "float", "bool", "time", "csv"]

# Columns every category table carries ahead of its datatype columns.
AUDIT_COLUMNS: tuple[str, ...] = ("id", "created_at", "updated_at", "deleted_at")

# Page size collaborators fall back to when none (or a non-positive one) is given.
DEFAULT_PAGE_SIZE = 10

# Tables that belong to attimo itself rather than to a category.
SYSTEM_TABLES: frozenset[str] = frozenset({"metadata", "datatypes", "pending"})


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def quote_ident(name: str) -> str:
    """Double-quote an identifier that has already passed ``check_identifiers``."""
    return f'"{name}"'


class DBMixinProtocol(Protocol):
    """Shared attributes and methods that DB mixins access via self.

    Mixins inherit this Protocol so mypy can type-check self.conn,
    self.transaction(), etc. without ``type: ignore`` on every call.
    Actual implementations are provided by AttimoDB at composition time.
    """

    db_path: Path
    logger: logging.Logger
    checks: CheckEngine
    _conn: sqlite3.Connection | None

    @property
    def conn(self) -> sqlite3.Connection: ...

    def transaction(self, *, write: bool = True) -> AbstractContextManager[sqlite3.Connection]: ...

    def get_datatype(self, datatype_id: int) -> Datatype: ...

    def get_datatype_by_name(self, name: str) -> Datatype: ...

    def resolve_datatype(self, ref: int | str) -> Datatype: ...

    def list_categories(self) -> list[str]: ...
