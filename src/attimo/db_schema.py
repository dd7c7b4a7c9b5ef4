"""Database schema definitions for the attimo system tables.

Category tables are not listed here: their DDL is generated from datatype
definitions at bootstrap (see db_categories.py). Statements are kept as a
tuple rather than one script because ``executescript`` commits implicitly,
and the whole bootstrap pass has to run inside a single transaction.
"""

from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """\
CREATE TABLE metadata (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at  TEXT NOT NULL,
    version     TEXT NOT NULL
)""",
    """\
CREATE TABLE datatypes (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    name              TEXT NOT NULL UNIQUE COLLATE NOCASE,
    variable_type     TEXT NOT NULL,
    completion_value  TEXT NOT NULL,
    completion_sort   TEXT NOT NULL,
    value_check       TEXT NOT NULL,
    fill_behavior     TEXT NOT NULL DEFAULT 'open',

    CHECK (variable_type IN ('string', 'int', 'float', 'bool', 'time', 'csv')),
    CHECK (fill_behavior IN ('open', 'close'))
)""",
    """\
CREATE TABLE pending (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL,
    deleted_at  TEXT,
    pointer     TEXT NOT NULL,

    CHECK (pointer LIKE '%:%')
)""",
    # A pointer is unique only among live rows; tombstones accumulate.
    "CREATE UNIQUE INDEX idx_pending_pointer_live ON pending(pointer) WHERE deleted_at IS NULL",
)
