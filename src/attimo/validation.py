"""Identifier safety for names that end up inside SQL text.

Category and column names can come from configuration, and SQLite cannot
bind identifiers as parameters, so every name is checked against an
allowlist before it is interpolated into DDL or DML.

Pure functions with no sqlite3 or web framework dependencies.
"""

from __future__ import annotations

import re
from typing import Any

from attimo.db_base import AUDIT_COLUMNS, SYSTEM_TABLES
from attimo.errors import IdentifierError

_MAX_IDENTIFIER_LENGTH = 64
_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9_]+")


def sanitize_identifier(value: Any) -> tuple[str, str | None]:
    """Validate an identifier.

    Returns (identifier, None) on success or ("", error_message) on failure.
    Unlike free-text input, identifiers are never stripped: surrounding
    whitespace is rejected rather than silently removed.
    """
    if not isinstance(value, str):
        return ("", "identifier must be a string")
    if not value:
        return ("", "identifier must not be empty")
    if len(value) > _MAX_IDENTIFIER_LENGTH:
        return ("", f"identifier must be at most {_MAX_IDENTIFIER_LENGTH} characters")
    if not _IDENTIFIER_PATTERN.fullmatch(value):
        return ("", "only letters, digits and underscores are allowed")
    return (value, None)


def is_identifier_safe(value: Any) -> bool:
    return sanitize_identifier(value)[1] is None


def check_identifiers(*names: Any) -> None:
    """Raise IdentifierError for the first name that is not identifier-safe."""
    for name in names:
        _, err = sanitize_identifier(name)
        if err is not None:
            raise IdentifierError(str(name), err)


def check_category_name(name: Any) -> str:
    """Validate a category (table) name, including reserved table names."""
    check_identifiers(name)
    lowered = name.lower()
    if lowered in SYSTEM_TABLES or lowered.startswith("sqlite_"):
        raise IdentifierError(name, "name is reserved for internal tables")
    return str(name)


def check_column_name(name: Any) -> str:
    """Validate a datatype/column name, including the audit column names."""
    check_identifiers(name)
    if name.lower() in AUDIT_COLUMNS:
        raise IdentifierError(name, "name is reserved for audit columns")
    return str(name)
