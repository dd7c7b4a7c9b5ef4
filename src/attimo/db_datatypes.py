"""DatatypesMixin -- the read-only datatype registry.

Datatypes are written exactly once, by the bootstrap pass in
``AttimoDB.initialize()``; after that the registry only answers lookups.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from typing import Any

from attimo.datatypes import Datatype, parse_datatype_spec
from attimo.db_base import DBMixinProtocol
from attimo.errors import ConfigurationError, UnknownDatatypeError

_DATATYPE_COLUMNS = "id, name, variable_type, completion_value, completion_sort, value_check, fill_behavior"


class DatatypesMixin(DBMixinProtocol):
    """Datatype lookups and bootstrap seeding.

    Inherits ``DBMixinProtocol`` for type-safe access to shared attributes.
    Actual implementations provided by ``AttimoDB`` at composition time via MRO.
    """

    # -- Lookups -------------------------------------------------------------

    def get_datatype(self, datatype_id: int) -> Datatype:
        row = self.conn.execute(
            f"SELECT {_DATATYPE_COLUMNS} FROM datatypes WHERE id = ?",
            (datatype_id,),
        ).fetchone()
        if row is None:
            raise UnknownDatatypeError(datatype_id)
        return Datatype.from_row(row)

    def get_datatype_by_name(self, name: str) -> Datatype:
        row = self.conn.execute(
            f"SELECT {_DATATYPE_COLUMNS} FROM datatypes WHERE name = ?",
            (name,),
        ).fetchone()
        if row is None:
            raise UnknownDatatypeError(name)
        return Datatype.from_row(row)

    def resolve_datatype(self, ref: int | str) -> Datatype:
        """Look a datatype up by id (int) or by name (str)."""
        if isinstance(ref, int) and not isinstance(ref, bool):
            return self.get_datatype(ref)
        return self.get_datatype_by_name(str(ref))

    def list_datatypes(self) -> list[Datatype]:
        rows = self.conn.execute(f"SELECT {_DATATYPE_COLUMNS} FROM datatypes ORDER BY id").fetchall()
        return [Datatype.from_row(r) for r in rows]

    # -- Seeding -------------------------------------------------------------

    def _seed_datatypes(self, conn: sqlite3.Connection, definitions: Iterable[dict[str, Any]]) -> int:
        """Insert validated datatype definitions. Caller owns the transaction.

        Returns the number of datatypes seeded.
        """
        count = 0
        for raw in definitions:
            spec = parse_datatype_spec(raw)
            existing = conn.execute("SELECT id FROM datatypes WHERE name = ?", (spec["name"],)).fetchone()
            if existing is not None:
                msg = f"Duplicate datatype name '{spec['name']}'"
                raise ConfigurationError(msg)
            conn.execute(
                "INSERT INTO datatypes (name, variable_type, completion_value, completion_sort, value_check, fill_behavior) "
                "VALUES (:name, :variable_type, :completion_value, :completion_sort, :value_check, :fill_behavior)",
                spec,
            )
            count += 1
            self.logger.debug("Seeded datatype: %s (%s, %s)", spec["name"], spec["variable_type"], spec["value_check"])
        return count
