"""Datatype definitions -- parsing, storage mapping, and value coercion.

A Datatype is a reusable field definition: a logical value type, completion
hints for interactive collaborators, a value-check expression, and whether
the column is filled when an item is opened or when it is closed.
CategoryTemplates reference datatypes by id or by name and are only used
once, to materialize a category table.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from attimo.checks import parse_check
from attimo.db_base import FillBehavior, VariableType
from attimo.dates import format_date
from attimo.errors import ConfigurationError, ValidationError
from attimo.types.core import DatatypeDict
from attimo.validation import check_category_name, check_column_name

VARIABLE_TYPES: frozenset[str] = frozenset({"string", "int", "float", "bool", "time", "csv"})
FILL_BEHAVIORS: frozenset[str] = frozenset({"open", "close"})

# Logical type -> SQLite column type
STORAGE_TYPES: dict[str, str] = {
    "string": "TEXT",
    "int": "INTEGER",
    "float": "REAL",
    "bool": "INTEGER",
    "time": "DATETIME",
    "csv": "TEXT",
}

_TRUE_STRINGS = frozenset({"true", "yes", "y", "1", "on"})
_FALSE_STRINGS = frozenset({"false", "no", "n", "0", "off"})


# ---------------------------------------------------------------------------
# Frozen dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Datatype:
    """A reusable field definition backing one column per category."""

    id: int
    name: str
    variable_type: VariableType
    completion_value: str
    completion_sort: str
    value_check: str
    fill_behavior: FillBehavior = "open"

    @property
    def storage_type(self) -> str:
        return STORAGE_TYPES[self.variable_type]

    @classmethod
    def from_row(cls, row: Any) -> Datatype:
        return cls(
            id=row["id"],
            name=row["name"],
            variable_type=row["variable_type"],
            completion_value=row["completion_value"],
            completion_sort=row["completion_sort"],
            value_check=row["value_check"],
            fill_behavior=row["fill_behavior"],
        )

    def to_dict(self) -> DatatypeDict:
        return DatatypeDict(
            id=self.id,
            name=self.name,
            variable_type=self.variable_type,
            completion_value=self.completion_value,
            completion_sort=self.completion_sort,
            value_check=self.value_check,
            fill_behavior=self.fill_behavior,
        )


@dataclass(frozen=True)
class CategoryTemplate:
    """A category name plus its ordered datatype references (ids or names)."""

    name: str
    columns: tuple[int | str, ...]

    def __post_init__(self) -> None:
        check_category_name(self.name)
        if not self.columns:
            msg = f"Category '{self.name}' must reference at least one datatype"
            raise ConfigurationError(msg)
        for ref in self.columns:
            if isinstance(ref, bool) or not isinstance(ref, (int, str)):
                msg = f"Category '{self.name}': datatype references must be ids or names, got {ref!r}"
                raise ConfigurationError(msg)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> CategoryTemplate:
        if not isinstance(raw, dict) or "name" not in raw:
            msg = f"Category definition must be an object with a 'name', got {raw!r}"
            raise ConfigurationError(msg)
        columns = raw.get("columns", raw.get("column_ids"))
        if not isinstance(columns, list):
            msg = f"Category '{raw['name']}': 'columns' must be a list, got {type(columns).__name__}"
            raise ConfigurationError(msg)
        return cls(name=raw["name"], columns=tuple(columns))


def parse_datatype_spec(raw: dict[str, Any]) -> dict[str, Any]:
    """Validate a datatype seed definition and fill in optional fields.

    Returns a dict ready to insert into the ``datatypes`` table (no id).

    Raises:
        ConfigurationError: If any field is missing, of the wrong kind, or
            the check expression is malformed.
    """
    if not isinstance(raw, dict):
        msg = f"Datatype definition must be an object, got {type(raw).__name__}"
        raise ConfigurationError(msg)
    name = raw.get("name")
    check_column_name(name)
    variable_type = raw.get("variable_type", "string")
    if variable_type not in VARIABLE_TYPES:
        allowed = sorted(VARIABLE_TYPES)
        msg = f"Invalid variable_type '{variable_type}' for datatype '{name}': must be one of {allowed}"
        raise ConfigurationError(msg)
    fill_behavior = raw.get("fill_behavior", "open")
    if fill_behavior not in FILL_BEHAVIORS:
        allowed = sorted(FILL_BEHAVIORS)
        msg = f"Invalid fill_behavior '{fill_behavior}' for datatype '{name}': must be one of {allowed}"
        raise ConfigurationError(msg)
    value_check = raw.get("value_check", "no")
    if not isinstance(value_check, str):
        msg = f"Datatype '{name}': value_check must be a string"
        raise ConfigurationError(msg)
    parse_check(value_check)
    return {
        "name": name,
        "variable_type": variable_type,
        "completion_value": str(raw.get("completion_value", "no")),
        "completion_sort": str(raw.get("completion_sort", "no")),
        "value_check": value_check,
        "fill_behavior": fill_behavior,
    }


# ---------------------------------------------------------------------------
# Value handling
# ---------------------------------------------------------------------------


def normalize_value(datatype: Datatype, value: Any) -> Any:
    """Bring a Python value into the shape that is checked and stored.

    csv lists are comma-joined; date/datetime objects for ``time`` columns
    are rendered in the boundary date format. Anything else passes through.
    """
    if datatype.variable_type == "csv" and isinstance(value, (list, tuple)):
        return ",".join(str(v).strip() for v in value)
    if datatype.variable_type == "time" and isinstance(value, (date, datetime)):
        return format_date(value)
    return value


def coerce_value(datatype: Datatype, raw: str) -> Any:
    """Convert textual input (CLI flags, HTTP forms) to the datatype's type.

    Raises:
        ValidationError: If the text cannot represent the logical type.
    """
    kind = datatype.variable_type
    if kind == "int":
        try:
            return int(raw.strip())
        except ValueError:
            msg = f"Column {datatype.name}: expected an integer, got {raw!r}"
            raise ValidationError(datatype.name, msg, raw) from None
    if kind == "float":
        try:
            return float(raw.strip())
        except ValueError:
            msg = f"Column {datatype.name}: expected a number, got {raw!r}"
            raise ValidationError(datatype.name, msg, raw) from None
    if kind == "bool":
        lowered = raw.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        msg = f"Column {datatype.name}: expected true/false, got {raw!r}"
        raise ValidationError(datatype.name, msg, raw)
    if kind == "csv":
        return [part.strip() for part in raw.split(",") if part.strip()]
    return raw
