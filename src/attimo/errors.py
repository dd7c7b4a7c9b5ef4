"""Exception hierarchy for attimo.

Four families, matching how callers are expected to react:

- ``ConfigurationError`` -- a definition is wrong (unknown datatype, bad
  identifier, malformed check expression). Fatal to the operation.
- ``ValidationError`` -- the caller's input failed a column check.
- ``NotFoundError`` -- an update/close/delete matched no live row.
- ``sqlite3.Error`` -- infrastructure failures are re-raised unchanged.

Configuration and validation errors subclass ``ValueError`` and
``NotFoundError`` subclasses ``LookupError`` so generic handlers keep working.
"""

from __future__ import annotations

from typing import Any


class AttimoError(Exception):
    """Base class for all attimo errors."""


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------


class ConfigurationError(AttimoError, ValueError):
    """A datatype, category, or check definition cannot be used."""


class IdentifierError(ConfigurationError):
    """Raised when a name is not safe to interpolate into SQL."""

    def __init__(self, identifier: str, reason: str = "") -> None:
        self.identifier = identifier
        detail = f": {reason}" if reason else ""
        super().__init__(f"{identifier!r} is not a valid identifier{detail}")


class UnknownDatatypeError(ConfigurationError):
    """Raised when a datatype id or name is not in the registry."""

    def __init__(self, key: int | str) -> None:
        self.key = key
        kind = "id" if isinstance(key, int) else "name"
        super().__init__(f"Unknown datatype {kind}: {key!r}")


class UnknownCategoryError(ConfigurationError):
    """Raised when a category has no backing table."""

    def __init__(self, category: str) -> None:
        self.category = category
        super().__init__(f"Unknown category: {category!r}")


class CheckSyntaxError(ConfigurationError):
    """Raised when a value-check expression does not follow ``name(arg,...)``."""

    def __init__(self, expression: str, reason: str) -> None:
        self.expression = expression
        super().__init__(f"Malformed check expression {expression!r}: {reason}")


# ---------------------------------------------------------------------------
# Input and lookup errors
# ---------------------------------------------------------------------------


class ValidationError(AttimoError, ValueError):
    """Raised when a row value is rejected; names the offending column."""

    def __init__(self, column: str, message: str, value: Any = None) -> None:
        self.column = column
        self.value = value
        super().__init__(message)


class NotFoundError(AttimoError, LookupError):
    """Raised when a write targets no live row (missing, deleted, or closed)."""

    def __init__(self, category: str, item_id: int, message: str = "") -> None:
        self.category = category
        self.item_id = item_id
        super().__init__(message or f"No item found with id {item_id} in category {category}")

    def __str__(self) -> str:
        return str(self.args[0])
